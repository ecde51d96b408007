from enum import Enum

Coord = tuple[int, int]  # (x, y)


class Direction(str, Enum):
    ORTHOGONAL = "orthogonal"
    DIAGONAL = "diagonal"
    BOTH = "both"


class ZoneKind(str, Enum):
    MOVE = "move"
    REVEAL = "reveal"
    KILL = "kill"


class PieceKind(str, Enum):
    SCOUT = "scout"
    STRIKER = "striker"


class LossPolicy(str, Enum):
    """
    How a player is eliminated:
    - NO_PIECES_LEFT: the roster is empty
    - NO_KILLER_LEFT: no remaining piece has a kill range
    """

    NO_PIECES_LEFT = "no_pieces_left"
    NO_KILLER_LEFT = "no_killer_left"


class TurnPhase(str, Enum):
    AWAITING_PLAY = "awaiting_play"
    AWAITING_FORCED_KILL = "awaiting_forced_kill"


class CommandResult(str, Enum):
    APPLIED = "applied"
    ILLEGAL = "illegal"
    ERROR = "error"
