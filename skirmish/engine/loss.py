from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..errors import UnknownPolicyError
from ..models.enums import LossPolicy

if TYPE_CHECKING:
    from ..models.player import Player
    from .board import BoardState


class LossCondition(Protocol):
    policy: LossPolicy

    def has_lost(self, board: BoardState, player: Player) -> bool: ...


class NoPiecesLeft:
    policy = LossPolicy.NO_PIECES_LEFT

    def has_lost(self, board: BoardState, player: Player) -> bool:
        return len(player.roster) == 0


class NoKillerLeft:
    policy = LossPolicy.NO_KILLER_LEFT

    def has_lost(self, board: BoardState, player: Player) -> bool:
        return not any(p.can_kill for p in player.roster)


_POLICIES: dict[LossPolicy, type[LossCondition]] = {
    LossPolicy.NO_PIECES_LEFT: NoPiecesLeft,
    LossPolicy.NO_KILLER_LEFT: NoKillerLeft,
}


def loss_condition_for(policy: LossPolicy | str) -> LossCondition:
    try:
        key = LossPolicy(policy)
    except ValueError:
        raise UnknownPolicyError(
            "unknown_loss_policy", f"Unknown loss policy: {policy!r}"
        ) from None
    return _POLICIES[key]()
