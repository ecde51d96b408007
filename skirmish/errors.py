"""Error taxonomy for the rules engine.

Every error carries a machine-readable ``kind`` (one per class), a ``reason``
code naming the violated precondition, and a human-readable ``detail``.
"""

from __future__ import annotations


class GameError(Exception):
    kind = "game_error"

    def __init__(self, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail or reason
        super().__init__(self.detail)


class ConfigurationError(GameError):
    kind = "configuration_error"


class InitializationError(GameError):
    kind = "initialization_error"


class IllegalMoveError(GameError):
    kind = "illegal_move"


class IllegalKillError(GameError):
    kind = "illegal_kill"


class PieceNotPlacedError(GameError):
    kind = "piece_not_placed"


class UnknownPolicyError(GameError):
    kind = "unknown_policy"


# Errors a player can trigger with a single bad command.
COMMAND_ERRORS: tuple[type[GameError], ...] = (IllegalMoveError, IllegalKillError)
