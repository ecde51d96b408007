from __future__ import annotations

from ...errors import IllegalMoveError
from ...models.api import MoveCommand
from ..board import BoardState
from .base import CommandHandler


class MoveHandler(CommandHandler):
    command_type = MoveCommand

    def apply(self, board: BoardState, command: MoveCommand) -> None:
        slot = board.get_slot(command.from_x, command.from_y)
        piece = slot.occupant if slot else None
        if piece is not None and command.player_id and piece.owner_id != command.player_id:
            raise IllegalMoveError("not_your_piece", "Cannot move: piece belongs to another player")
        board.move(piece, command.to_x, command.to_y)
