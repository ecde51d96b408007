from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ...models.api import Command
    from ..board import BoardState


class CommandHandler(Protocol):
    command_type: type

    def apply(self, board: BoardState, command: Command) -> None: ...


Registry = dict[type, CommandHandler]
