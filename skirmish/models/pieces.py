from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .enums import Coord, Direction, PieceKind


class ZoneSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    range: float = Field(default=0, ge=0)
    direction: Direction = Direction.ORTHOGONAL


class Piece(BaseModel):
    """A unit on the board. Its position lives in the board's location index."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    owner_id: str
    kind: PieceKind
    name: str
    move_zone: ZoneSpec = ZoneSpec(range=1)
    reveal_zone: ZoneSpec = ZoneSpec(range=1)
    kill_zone: ZoneSpec = ZoneSpec()
    spawn_offset: Coord = (0, 0)

    @property
    def can_kill(self) -> bool:
        return self.kill_zone.range > 0


def scout(owner_id: str, board_size: int = 5) -> Piece:
    # sees the whole board along its row and column, cannot kill
    return Piece(
        owner_id=owner_id,
        kind=PieceKind.SCOUT,
        name="scout",
        move_zone=ZoneSpec(range=1),
        reveal_zone=ZoneSpec(range=board_size),
        kill_zone=ZoneSpec(range=0),
        spawn_offset=(0, 0),
    )


def striker(owner_id: str) -> Piece:
    return Piece(
        owner_id=owner_id,
        kind=PieceKind.STRIKER,
        name="striker",
        move_zone=ZoneSpec(range=1),
        reveal_zone=ZoneSpec(range=1),
        kill_zone=ZoneSpec(range=2),
        spawn_offset=(0, 1),
    )


def default_roster(owner_id: str, board_size: int = 5) -> list[Piece]:
    return [scout(owner_id, board_size), striker(owner_id)]
