from pydantic import BaseModel

from .enums import Coord
from .pieces import Piece


class Slot(BaseModel):
    x: int
    y: int
    occupant: Piece | None = None

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)

    @property
    def is_empty(self) -> bool:
        return self.occupant is None
