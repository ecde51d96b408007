from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import COMMAND_ERRORS, GameError
from ..models.enums import CommandResult
from .actions.kill import KillHandler
from .actions.move import MoveHandler
from .logging.logger import log_error, log_event, log_illegal

if TYPE_CHECKING:
    from ..models.api import Command
    from .actions.base import Registry
    from .board import BoardState

default_handlers: Registry = {
    MoveHandler.command_type: MoveHandler(),
    KillHandler.command_type: KillHandler(),
}


class GameEngine:
    """Dispatches player commands to a board and records the outcome."""

    def __init__(self, handlers: Registry | None = None):
        self.handlers: Registry = handlers or default_handlers

    def process(self, board: BoardState, command: Command) -> None:
        h = self.handlers.get(type(command))
        if not h:
            raise TypeError(f"unknown command: {type(command).__name__}")
        try:
            h.apply(board, command)
        except COMMAND_ERRORS as e:
            log_illegal(board, command, e)
            raise
        except GameError as e:
            log_error(board, command, e)
            raise
        log_event(board, command, CommandResult.APPLIED)
