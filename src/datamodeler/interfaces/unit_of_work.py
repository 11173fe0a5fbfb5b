"""Unit of Work interface for DATAMODELER.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
exposing one repository per entity collection, with abstract commit/rollback.
Every write command runs inside exactly one unit of work so that integrity
checks and the write observe the same snapshot.
"""

from __future__ import annotations

import abc

from .repositories import (
    DataModelRepository,
    DomainRepository,
    LayerRepository,
    ObjectRepository,
    RelationshipRepository,
    SystemRepository,
)


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    systems: SystemRepository
    domains: DomainRepository
    data_models: DataModelRepository
    layers: LayerRepository
    objects: ObjectRepository
    relationships: RelationshipRepository

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; anything not committed is lost.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
