"""Shared setup for handler test classes.

Every test gets a bus over a fresh `InMemoryData` store. Subclasses list the
fixtures their seeding needs in ``seed_uses`` (available as ``self.fx``) and
override `_seed_bus` to preload data. The commit flag is cleared after
seeding so assertions only see the command under test.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from datamodeler.adapters.repositories.memory import InMemoryData
    from datamodeler.service_layer.messagebus import MessageBus


class HandlerTestBase:
    bus: MessageBus
    fx: SimpleNamespace
    seed_uses: tuple[str, ...] = ()

    @pytest.fixture(autouse=True)
    def _attach_bus(self, request, make_test_bus):
        self.bus = make_test_bus()
        self.fx = SimpleNamespace(
            **{name: request.getfixturevalue(name) for name in self.seed_uses}
        )
        self._seed_bus(request)
        self.reset_committed()

    def _seed_bus(self, request) -> None:
        """Preload the store; ``request`` gives access to any other fixture."""

    @property
    def data(self) -> InMemoryData:
        return self.bus.uow.data  # type: ignore[attr-defined]

    def assert_committed(self) -> None:
        assert getattr(self.bus.uow, "committed", None) is True

    def assert_not_committed(self) -> None:
        assert getattr(self.bus.uow, "committed", None) is False

    def reset_committed(self) -> None:
        self.bus.uow.committed = False  # type: ignore[attr-defined]
