from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError
from .models.enums import LossPolicy
from .models.player import PlayerOrigin

MIN_PLAYERS = 2
MAX_PLAYERS = 4


class RulesConfig(BaseModel):
    """Rule values for one game. Read once at startup, never mutated."""

    model_config = ConfigDict(frozen=True)

    board_size: int = Field(default=5, ge=3)
    required_player_count: int = Field(default=2, ge=MIN_PLAYERS, le=MAX_PLAYERS)
    # Superseded by "one move per remaining piece"; kept for clients that read it.
    moves_per_turn: int = Field(default=2, ge=1)
    count_kill_as_turn_move: bool = False
    can_move_piece_multiple_times: bool = False
    loss_policy: LossPolicy = LossPolicy.NO_PIECES_LEFT


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


def load_rules() -> RulesConfig:
    try:
        return RulesConfig(
            board_size=int(os.getenv("SKIRMISH_BOARD_SIZE", "5")),
            required_player_count=int(os.getenv("SKIRMISH_PLAYER_COUNT", "2")),
            moves_per_turn=int(os.getenv("SKIRMISH_MOVES_PER_TURN", "2")),
            count_kill_as_turn_move=_flag("SKIRMISH_COUNT_KILL_AS_MOVE", "false"),
            can_move_piece_multiple_times=_flag("SKIRMISH_MULTI_MOVE", "false"),
            loss_policy=os.getenv("SKIRMISH_LOSS_POLICY", LossPolicy.NO_PIECES_LEFT.value),
        )
    except (ValueError, ValidationError) as e:
        raise ConfigurationError("invalid_rules", f"Cannot load rules: {e}") from e


def player_origins(board_size: int) -> list[PlayerOrigin]:
    """Corner origins, in join order."""
    last = board_size - 1
    return [
        PlayerOrigin(x=0, y=0, x_mirror=1, y_mirror=1),
        PlayerOrigin(x=last, y=last, x_mirror=-1, y_mirror=-1),
        PlayerOrigin(x=0, y=last, x_mirror=1, y_mirror=-1),
        PlayerOrigin(x=last, y=0, x_mirror=-1, y_mirror=1),
    ]
