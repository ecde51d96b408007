# tests/utils/data.py
from skirmish.config import player_origins
from skirmish.engine.board import BoardState
from skirmish.models.board import Slot
from skirmish.models.pieces import default_roster, scout
from skirmish.models.player import Player, PlayerOrigin


def grid(size: int = 5) -> list[Slot]:
    """Flat slot list in board scan order."""
    return [Slot(x=x, y=y) for y in range(size) for x in range(size)]


def coords(slots) -> list[tuple[int, int]]:
    return [(s.x, s.y) for s in slots]


def corner_players(size: int = 5) -> list[Player]:
    """p1 at (0,0), p2 at the far corner, default rosters."""
    last = size - 1
    return [
        Player(id="p1", name="alice", roster=default_roster("p1", size)),
        Player(
            id="p2",
            name="bob",
            roster=default_roster("p2", size),
            origin=PlayerOrigin(x=last, y=last, x_mirror=-1, y_mirror=-1),
        ),
    ]


def facing_players(size: int = 5, p2_roster: str = "default") -> list[Player]:
    """p2 spawns down column 0 at (0,3)/(0,4), two cells from p1's striker.

    p1: scout (0,0), striker (0,1). p2: scout (0,3), striker (0,4) unless
    ``p2_roster`` is "scout_only".
    """
    roster = default_roster("p2", size) if p2_roster == "default" else [scout("p2", size)]
    return [
        Player(id="p1", name="alice", roster=default_roster("p1", size)),
        Player(id="p2", name="bob", roster=roster, origin=PlayerOrigin(x=0, y=3)),
    ]


def piece_at(board: BoardState, x: int, y: int):
    slot = board.get_slot(x, y)
    assert slot is not None and slot.occupant is not None, f"no piece at ({x}, {y})"
    return slot.occupant


def assert_board_consistent(board: BoardState) -> None:
    """Occupied slots and live rosters are in one-to-one correspondence."""
    occupied = board.occupied_slots()
    live = board.all_pieces()
    assert len(occupied) == len(live)
    ids = [s.occupant.id for s in occupied]
    assert len(ids) == len(set(ids))
    assert set(ids) == {p.id for p in live}
    for piece in live:
        x, y = board.locations[piece.id]
        assert board.rows[y][x].occupant.id == piece.id
    assert set(board.locations) == set(ids)


def seated_players(count: int, size: int = 5) -> list[Player]:
    """``count`` players with default rosters on the lobby's corners, in join order."""
    return [
        Player(
            id=f"p{i + 1}",
            name=f"player{i + 1}",
            roster=default_roster(f"p{i + 1}", size),
            origin=o,
        )
        for i, o in enumerate(player_origins(size)[:count])
    ]
