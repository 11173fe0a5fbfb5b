"""Integration tests for the SQLAlchemy-backed Unit of Work adapter.

Verifies commit and rollback behavior of SqlAlchemyUnitOfWork.
"""

import pytest

from datamodeler.adapters.unit_of_work import SqlAlchemyUnitOfWork
from datamodeler.domain.business_domains import Domain
from datamodeler.domain.model_graph import DataModel, Layer, LayerKind


def test_uow_commit_persists(sqlite_engine_memory):
    """Committed rows are visible to the next unit of work."""
    uow = SqlAlchemyUnitOfWork(sqlite_engine_memory)
    with uow:
        stored = uow.domains.add_domain(Domain(id=None, name="Finance"))
        uow.commit()

    with uow:
        assert uow.domains.get_domain(stored.id) == stored


def test_uow_without_commit_discards(sqlite_engine_memory):
    """Leaving the unit without commit() rolls back."""
    uow = SqlAlchemyUnitOfWork(sqlite_engine_memory)
    with uow:
        uow.domains.add_domain(Domain(id=None, name="Finance"))

    with uow:
        assert uow.domains.list_domains() == []


def test_rolls_back_on_error(sqlite_engine_memory):
    """An exception inside the unit rolls back every repository's writes."""

    class MyException(Exception):
        """Custom exception for testing."""

    uow = SqlAlchemyUnitOfWork(sqlite_engine_memory)
    with pytest.raises(MyException):
        with uow:
            model = uow.data_models.add(DataModel(id=None, name="Sales"))
            uow.layers.add(
                Layer(id=None, data_model_id=model.id, name="L", layer=LayerKind.LOGICAL)
            )
            raise MyException()

    with uow:
        assert uow.data_models.list() == []
        assert uow.layers.list() == []


def test_repositories_share_one_connection(sqlite_engine_file):
    """All repositories of a unit see each other's uncommitted writes."""
    uow = SqlAlchemyUnitOfWork(sqlite_engine_file)
    with uow:
        model = uow.data_models.add(DataModel(id=None, name="Sales"))
        layer = uow.layers.add(
            Layer(id=None, data_model_id=model.id, name="L", layer=LayerKind.FLOW)
        )
        assert uow.layers.list(model.id) == [layer]
        assert uow.objects.connection is uow.layers.connection


def test_connection_closed_when_rollback_fails(sqlite_engine_memory, monkeypatch):
    """A failing rollback still releases the connection and propagates."""

    def broken_rollback(self):
        raise RuntimeError("rollback failed")

    monkeypatch.setattr(SqlAlchemyUnitOfWork, "rollback", broken_rollback)
    uow = SqlAlchemyUnitOfWork(sqlite_engine_memory)
    with pytest.raises(RuntimeError, match="rollback failed"):
        with uow:
            pass

    assert uow.connection.closed
