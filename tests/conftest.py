# Shared fixtures: a private event bus per test and ready-made boards.

import pytest

from skirmish.config import RulesConfig
from skirmish.engine.board import BoardState
from skirmish.events import (
    BoardChanged,
    CommandEvent,
    EventBus,
    GameEnded,
    PlayerLost,
    PlayersChanged,
    TurnChanged,
)
from tests.utils.data import corner_players, facing_players


class Recorder:
    """Collects every event emitted on a bus, in order."""

    TYPES = (BoardChanged, TurnChanged, PlayersChanged, PlayerLost, GameEnded, CommandEvent)

    def __init__(self, bus: EventBus):
        self.events: list = []
        for t in self.TYPES:
            bus.subscribe(t, self.events.append)

    def of(self, event_type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def recorder(bus: EventBus) -> Recorder:
    return Recorder(bus)


@pytest.fixture()
def rules() -> RulesConfig:
    return RulesConfig()


@pytest.fixture()
def board(rules: RulesConfig, bus: EventBus, recorder: Recorder) -> BoardState:
    b = BoardState(rules, bus=bus)
    b.init(corner_players())
    recorder.clear()
    return b


@pytest.fixture()
def facing_board(rules: RulesConfig, bus: EventBus, recorder: Recorder) -> BoardState:
    b = BoardState(rules, bus=bus)
    b.init(facing_players())
    recorder.clear()
    return b
