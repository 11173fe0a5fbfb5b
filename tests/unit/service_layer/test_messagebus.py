"""Unit tests for the MessageBus routing and logging."""

from functools import partial

import pytest

from datamodeler.adapters.unit_of_work import InMemoryUnitOfWork
from datamodeler.domain.errors import NotFoundError
from datamodeler.service_layer import commands
from datamodeler.service_layer.messagebus import MessageBus, NoHandlerForCommand

# pylint: disable=unused-argument


@pytest.fixture(name="uow")
def _uow():
    return InMemoryUnitOfWork()


def _messages(caplog, level: str) -> list[str]:
    return [rec.getMessage() for rec in caplog.records if rec.levelname == level]


def test_routes_by_command_type(uow, caplog):
    """Each command reaches its own handler, once, and the dispatch is logged."""
    seen: list[commands.Command] = []

    def delete_system(cmd: commands.DeleteSystem) -> None:
        seen.append(cmd)

    def create_domain(cmd: commands.CreateDomain) -> None:
        raise AssertionError("wrong handler")

    bus = MessageBus(
        uow,
        command_handlers={
            commands.DeleteSystem: delete_system,
            commands.CreateDomain: create_domain,
        },
    )
    cmd = commands.DeleteSystem(7)
    with caplog.at_level("DEBUG"):
        bus.handle(cmd)

    assert seen == [cmd]
    assert f"Handling command {cmd} with handler delete_system" in _messages(
        caplog, "DEBUG"
    )


def test_hands_back_the_handler_result(uow):
    bus = MessageBus(
        uow, command_handlers={commands.DeleteObject: lambda cmd: cmd.object_id + 1}
    )
    assert bus.handle(commands.DeleteObject(41)) == 42


def test_unrouted_command_raises_lookup_error(uow, caplog):
    bus = MessageBus(uow, command_handlers={})
    with caplog.at_level("ERROR"), pytest.raises(LookupError) as excinfo:
        bus.handle(commands.DeleteLayer(1))

    assert isinstance(excinfo.value, NoHandlerForCommand)
    assert str(excinfo.value) == "No handler found for command DeleteLayer"
    assert "No handler found for command DeleteLayer" in _messages(caplog, "ERROR")


def test_handler_errors_are_logged_and_reraised(uow, caplog):
    def delete_relationship(cmd):
        raise NotFoundError("relationship", cmd.relationship_id)

    bus = MessageBus(
        uow, command_handlers={commands.DeleteRelationship: delete_relationship}
    )
    cmd = commands.DeleteRelationship(3)
    with caplog.at_level("ERROR"), pytest.raises(NotFoundError):
        bus.handle(cmd)

    [record] = [r for r in caplog.records if r.levelname == "ERROR"]
    assert record.getMessage() == (
        f"Exception handling command {cmd} with handler delete_relationship"
    )
    assert record.exc_info is not None


@pytest.mark.parametrize("kind", ["partial", "callable"])
def test_handler_names_for_injected_handlers(uow, caplog, kind):
    """Partials log the wrapped function's name; other callables their repr."""

    def delete_data_model(cmd, uow):
        return uow

    class Handler:
        def __call__(self, cmd):
            return None

    handler = partial(delete_data_model, uow=uow) if kind == "partial" else Handler()
    bus = MessageBus(uow, command_handlers={commands.DeleteDataModel: handler})
    with caplog.at_level("DEBUG"):
        bus.handle(commands.DeleteDataModel(1))

    [message] = _messages(caplog, "DEBUG")
    if kind == "partial":
        assert message.endswith("with handler delete_data_model")
    else:
        assert "with handler <" in message


def test_exposes_uow(uow):
    assert MessageBus(uow, command_handlers={}).uow is uow
