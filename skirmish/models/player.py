from typing import Literal

from pydantic import BaseModel, Field

from .pieces import Piece


class PlayerOrigin(BaseModel):
    """Spawn corner; mirrors flip spawn offsets so rosters face inward."""

    x: int
    y: int
    x_mirror: Literal[1, -1] = 1
    y_mirror: Literal[1, -1] = 1

    def place(self, offset: tuple[int, int]) -> tuple[int, int]:
        dx, dy = offset
        return self.x + dx * self.x_mirror, self.y + dy * self.y_mirror


class Player(BaseModel):
    id: str
    name: str = "player"
    roster: list[Piece] = Field(default_factory=list)
    origin: PlayerOrigin = PlayerOrigin(x=0, y=0)
    has_lost: bool = False
