"""Fake implementations for testing service layer handlers."""

from datamodeler.adapters.repositories.memory import InMemoryData
from datamodeler.adapters.unit_of_work import InMemoryUnitOfWork
from datamodeler.bootstrap.bootstrap import build_message_bus
from datamodeler.service_layer.handlers import COMMAND_HANDLERS
from datamodeler.service_layer.messagebus import MessageBus


class FakeUoW(InMemoryUnitOfWork):
    """In-memory unit of work that records whether it was committed."""

    def __init__(self, data: InMemoryData | None = None):
        super().__init__(data)
        self.committed = False

    def commit(self):
        super().commit()
        self.committed = True


def bootstrap_test_bus(data: InMemoryData | None = None) -> MessageBus:
    """Bootstrap a message bus for testing purposes."""
    uow = FakeUoW(data)
    return build_message_bus(uow=uow, command_handlers=COMMAND_HANDLERS)
