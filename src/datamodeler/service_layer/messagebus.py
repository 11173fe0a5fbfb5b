"""Message bus routing commands to their handlers."""

import logging
from collections.abc import Callable
from typing import Any

from datamodeler.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """A simple, synchronous message bus for commands.

    Routes each command to its handler, logs the dispatch and any failure, and
    hands back whatever the handler returned (the new id for create commands).

    Args:
        uow: The unit of work injected into the handlers, exposed here for
            convenience (tests inspect it).
        command_handlers: A mapping of command types to handlers taking the
            command as their only argument. Other dependencies are injected
            beforehand (see `datamodeler.bootstrap`).
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: dict[type[Command], Callable[..., Any]],
    ) -> None:
        self.uow = uow
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> Any:
        """Handle a command by dispatching it to its handler.

        Returns:
            The handler's return value.

        Raises:
            NoHandlerForCommand: If no handler is registered for the command type.
            Exception: Whatever the handler raised, after logging it.
        """

        if handler := self._command_handlers.get(type(cmd)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling command %s with handler %s", cmd, handler_name)
            try:
                return handler(cmd)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise
        logger.error("No handler found for command %s", type(cmd).__name__)
        raise NoHandlerForCommand(cmd)

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
