import pytest

from skirmish import storage
from skirmish.engine.core import GameEngine
from skirmish.errors import IllegalKillError, IllegalMoveError
from skirmish.events import CommandEvent
from skirmish.logging_listeners import register_listeners
from skirmish.models.api import CommandLogEntry, HandshakeCommand, KillCommand, MoveCommand
from skirmish.models.enums import CommandResult

engine = GameEngine()


def test_applied_move_is_recorded(board, recorder):
    cmd = MoveCommand(player_id="p1", from_x=0, from_y=0, to_x=1, to_y=0)
    engine.process(board, cmd)

    ev = recorder.of(CommandEvent)[-1]
    assert ev.result == CommandResult.APPLIED
    assert ev.game_id == board.id and ev.player_id == "p1"
    assert ev.command is cmd


def test_illegal_command_is_recorded_and_raised(board, recorder):
    cmd = MoveCommand(player_id="p1", from_x=0, from_y=0, to_x=0, to_y=1)
    with pytest.raises(IllegalMoveError):
        engine.process(board, cmd)
    ev = recorder.of(CommandEvent)[-1]
    assert ev.result == CommandResult.ILLEGAL
    assert ev.error_kind == "illegal_move"
    assert ev.message == "Cannot move: slot is already taken"


def test_cannot_move_someone_elses_piece(board):
    cmd = MoveCommand(player_id="p1", from_x=4, from_y=4, to_x=3, to_y=4)
    with pytest.raises(IllegalMoveError) as ei:
        engine.process(board, cmd)
    assert ei.value.reason == "not_your_piece"


def test_move_from_empty_slot(board):
    cmd = MoveCommand(player_id="p1", from_x=2, from_y=2, to_x=2, to_y=3)
    with pytest.raises(IllegalMoveError) as ei:
        engine.process(board, cmd)
    assert ei.value.reason == "unknown_piece"


def test_kill_through_engine(facing_board, recorder):
    engine.process(facing_board, KillCommand(player_id="p1", x=0, y=3))
    assert facing_board.get_slot(0, 3).is_empty
    assert recorder.of(CommandEvent)[-1].result == CommandResult.APPLIED


def test_kill_by_unknown_player(facing_board):
    with pytest.raises(IllegalKillError) as ei:
        engine.process(facing_board, KillCommand(player_id="ghost", x=0, y=3))
    assert ei.value.reason == "unknown_player"


def test_unknown_command_type(board):
    with pytest.raises(TypeError):
        engine.process(board, HandshakeCommand(player_id="p1"))


def test_listeners_fill_the_command_log(board, bus):
    register_listeners(bus)
    engine.process(board, MoveCommand(player_id="p1", from_x=0, from_y=0, to_x=1, to_y=0))
    with pytest.raises(IllegalMoveError):
        engine.process(board, MoveCommand(player_id="p1", from_x=1, from_y=0, to_x=2, to_y=0))

    entries = storage.logs.list(board.id)
    assert [e.result for e in entries] == [CommandResult.APPLIED, CommandResult.ILLEGAL]
    assert entries[1].error_kind == "illegal_move"
    assert storage.logs.list(board.id, limit=1) == entries[-1:]
    storage.logs.drop(board.id)
    assert storage.logs.list(board.id) == []


def test_command_log_is_bounded():
    log = storage.CommandLog(max_entries=3)
    for i in range(5):
        log.append("g", _entry(i))
    assert [e.turn for e in log.list("g")] == [2, 3, 4]


def _entry(turn: int):
    return CommandLogEntry(
        game_id="g",
        turn=turn,
        command=KillCommand(x=0, y=0),
    )


def test_command_log_keeps_most_recent_games():
    log = storage.CommandLog(max_games=2)
    log.append("g1", _entry(1))
    log.append("g2", _entry(1))
    log.append("g1", _entry(2))
    log.append("g3", _entry(1))

    assert log.list("g2") == []
    assert [e.turn for e in log.list("g1")] == [1, 2]
    assert len(log.list("g3")) == 1
