from __future__ import annotations

from ...errors import IllegalKillError
from ...models.api import KillCommand
from ..board import BoardState
from .base import CommandHandler


class KillHandler(CommandHandler):
    command_type = KillCommand

    def apply(self, board: BoardState, command: KillCommand) -> None:
        player = board.player_by_id(command.player_id or "")
        if player is None:
            raise IllegalKillError("unknown_player", "Cannot kill piece: killer player not found")
        board.kill(player, command.x, command.y)
