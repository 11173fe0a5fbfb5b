"""Unit of work implementations for DATAMODELER.

`SqlAlchemyUnitOfWork` runs every repository of one unit on a single
Connection, so a command's reads and writes share one database transaction.
`InMemoryUnitOfWork` snapshots its store on entry and restores it on rollback.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from datamodeler.adapters.repositories.memory import (
    InMemoryData,
    InMemoryDataModelRepository,
    InMemoryDomainRepository,
    InMemoryLayerRepository,
    InMemoryObjectRepository,
    InMemoryRelationshipRepository,
    InMemorySystemRepository,
)
from datamodeler.adapters.repositories.sqlalchemy import (
    SqlAlchemyDataModelRepository,
    SqlAlchemyDomainRepository,
    SqlAlchemyLayerRepository,
    SqlAlchemyObjectRepository,
    SqlAlchemyRelationshipRepository,
    SqlAlchemySystemRepository,
)
from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        self.connection = self.engine.connect()
        self.systems = SqlAlchemySystemRepository(self.connection)
        self.domains = SqlAlchemyDomainRepository(self.connection)
        self.data_models = SqlAlchemyDataModelRepository(self.connection)
        self.layers = SqlAlchemyLayerRepository(self.connection)
        self.objects = SqlAlchemyObjectRepository(self.connection)
        self.relationships = SqlAlchemyRelationshipRepository(self.connection)
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of work over an `InMemoryData` store.

    Not safe for concurrent use; units must not interleave on one store.
    """

    def __init__(self, data: InMemoryData | None = None):
        self.data = data if data is not None else InMemoryData()
        self.systems = InMemorySystemRepository(self.data)
        self.domains = InMemoryDomainRepository(self.data)
        self.data_models = InMemoryDataModelRepository(self.data)
        self.layers = InMemoryLayerRepository(self.data)
        self.objects = InMemoryObjectRepository(self.data)
        self.relationships = InMemoryRelationshipRepository(self.data)
        self._snapshot = self.data.snapshot()

    def __enter__(self):
        self._snapshot = self.data.snapshot()
        return super().__enter__()

    def commit(self):
        self._snapshot = self.data.snapshot()

    def rollback(self):
        self.data.restore(self._snapshot)
