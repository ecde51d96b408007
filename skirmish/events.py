from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, cast

if TYPE_CHECKING:
    from collections.abc import Callable

    from skirmish.models.api import Command
    from skirmish.models.enums import CommandResult


@dataclass
class BoardChanged:
    game_id: str


@dataclass
class TurnChanged:
    game_id: str
    player_id: str


@dataclass
class PlayersChanged:
    game_id: str


@dataclass
class PlayerLost:
    game_id: str
    player_id: str


@dataclass
class GameEnded:
    game_id: str
    winner_id: str | None


@dataclass
class CommandEvent:
    game_id: str
    turn: int
    player_id: str | None
    command: Command
    result: CommandResult
    message: str | None = None
    error_kind: str | None = None


T = TypeVar("T")


class EventBus:
    def __init__(self) -> None:
        self._subs: dict[type[Any], list[object]] = {}

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        lst = self._subs.setdefault(event_type, [])
        lst.append(cast("object", handler))

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        lst = self._subs.get(event_type, [])
        if handler in lst:
            lst.remove(handler)

    def emit(self, event: Any) -> None:
        et = type(event)
        for h in list(self._subs.get(et, [])):
            # Let exceptions propagate; callers decide how to handle them
            cast("Callable[[Any], None]", h)(event)


# Global bus instance
event_bus = EventBus()
