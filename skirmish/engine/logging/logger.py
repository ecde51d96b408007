from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.api import Command
    from ..board import BoardState

from ...errors import GameError
from ...events import CommandEvent
from ...models.enums import CommandResult


def log_event(
    board: BoardState,
    command: Command,
    result: CommandResult,
    message: str | None = None,
    error_kind: str | None = None,
) -> None:
    board.bus.emit(
        CommandEvent(
            game_id=board.id,
            turn=board.turn.turn_number,
            player_id=command.player_id,
            command=command,
            result=result,
            message=message,
            error_kind=error_kind,
        )
    )


def log_illegal(board: BoardState, command: Command, error: GameError) -> None:
    log_event(board, command, CommandResult.ILLEGAL, error.detail, error.kind)


def log_error(board: BoardState, command: Command, error: Exception) -> None:
    kind = error.kind if isinstance(error, GameError) else type(error).__name__
    log_event(board, command, CommandResult.ERROR, str(error), kind)
