"""Bootstrap the message bus, the unit of work and the integrity audit."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from datamodeler import config
from datamodeler.adapters.audit.memory import InMemoryIntegrityAudit
from datamodeler.adapters.audit.sqlalchemy import SqlAlchemyIntegrityAudit
from datamodeler.adapters.db.engine import make_engine
from datamodeler.adapters.repositories.memory import InMemoryData
from datamodeler.adapters.unit_of_work import InMemoryUnitOfWork, SqlAlchemyUnitOfWork
from datamodeler.service_layer.handlers import COMMAND_HANDLERS
from datamodeler.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from datamodeler.interfaces.audit import IntegrityAudit
    from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork
    from datamodeler.service_layer.commands import Command


@dataclass(frozen=True)
class AppContainer:
    """Application wiring handed to entrypoints."""

    message_bus: MessageBus
    audit: IntegrityAudit

    @property
    def uow(self) -> AbstractUnitOfWork:
        """The unit of work shared by handlers and queries."""
        return self.message_bus.uow


def build_message_bus(
    uow: AbstractUnitOfWork,
    command_handlers: Mapping[type[Command], Callable[..., Any]],
) -> MessageBus:
    """Build a message bus with injected dependencies."""
    dependencies = {"uow": uow}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        uow,
        command_handlers=injected_command_handlers,
    )


def bootstrap(url: str | None = None, *, engine: Engine | None = None) -> AppContainer:
    """Wire the SQLAlchemy-backed application.

    Args:
        url: Database URL; defaults to ``DATAMODELER_DB_URL``.
        engine: An existing engine to reuse instead of creating one from ``url``.
    """
    if engine is None:
        engine = make_engine(url or config.get_db_url())
    return AppContainer(
        message_bus=build_message_bus(SqlAlchemyUnitOfWork(engine), COMMAND_HANDLERS),
        audit=SqlAlchemyIntegrityAudit(engine),
    )


def bootstrap_in_memory(data: InMemoryData | None = None) -> AppContainer:
    """Wire the application on an in-memory store (tests, demos)."""
    uow = InMemoryUnitOfWork(data)
    return AppContainer(
        message_bus=build_message_bus(uow, COMMAND_HANDLERS),
        audit=InMemoryIntegrityAudit(uow.data),
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return lambda message: handler(message, **deps)
