"""Backends shared by the modeling contract tests.

Every test here runs once per backend:

- ``memory``: `bootstrap_in_memory` over a fresh `InMemoryData`.
- ``sqlite_memory``: `bootstrap` on an in-memory SQLite engine (``create_all``).
- ``sqlite_file``: `bootstrap` on a file SQLite database built by Alembic.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest

from datamodeler.adapters.db.schema import data_model_object_relationships
from datamodeler.bootstrap import bootstrap, bootstrap_in_memory
from datamodeler.domain.model_graph import Relationship, RelationshipType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from datamodeler.bootstrap import AppContainer
    from datamodeler.interfaces.audit import IntegrityAudit
    from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork
    from datamodeler.service_layer.messagebus import MessageBus

BACKENDS = ["memory", "sqlite_memory", "sqlite_file"]


@dataclass
class Backend:
    """A wired application plus a way to write rows around the handlers."""

    name: str
    app: AppContainer
    engine: Engine | None = None

    @property
    def bus(self) -> MessageBus:
        return self.app.message_bus

    @property
    def uow(self) -> AbstractUnitOfWork:
        return self.app.uow

    @property
    def audit(self) -> IntegrityAudit:
        return self.app.audit

    def inject_relationship(
        self, layer_id: int, source_id: int, target_id: int, rel_type: str = "1:N"
    ) -> int:
        """Store a relationship without any integrity check.

        On SQLite foreign keys are switched off for the insert, so endpoints
        may point at objects that do not exist.
        """
        if self.engine is None:
            data = self.uow.data  # type: ignore[attr-defined]
            rel_id = data.next_id("relationships")
            data.relationships[rel_id] = Relationship(
                id=rel_id,
                model_id=layer_id,
                source_model_object_id=source_id,
                target_model_object_id=target_id,
                type=RelationshipType.parse(rel_type),
            )
            return rel_id

        with self.engine.connect() as conn:
            # PRAGMA is a no-op inside a transaction; run it before the insert begins one
            conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            result = conn.execute(
                data_model_object_relationships.insert().values(
                    model_id=layer_id,
                    source_model_object_id=source_id,
                    target_model_object_id=target_id,
                    type=rel_type,
                )
            )
            conn.commit()
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        return result.inserted_primary_key[0]


@pytest.fixture(params=BACKENDS)
def backend(request: pytest.FixtureRequest) -> Iterator[Backend]:
    """A freshly wired application for each backend."""
    match request.param:
        case "memory":
            yield Backend("memory", bootstrap_in_memory())
        case "sqlite_memory":
            engine = request.getfixturevalue("sqlite_engine_memory")
            yield Backend(request.param, bootstrap(engine=engine), engine)
        case "sqlite_file":
            engine = request.getfixturevalue("sqlite_engine_file")
            yield Backend(request.param, bootstrap(engine=engine), engine)
        case _:
            raise ValueError(f"unknown backend: {request.param}")
