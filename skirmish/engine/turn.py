from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..events import PlayerLost, PlayersChanged, TurnChanged
from ..models.enums import TurnPhase

if TYPE_CHECKING:
    from ..config import RulesConfig
    from ..models.pieces import Piece
    from ..models.player import Player
    from .board import BoardState
    from .loss import LossCondition

logger = logging.getLogger(__name__)


class TurnController:
    """Whose turn it is, how many plays were made, and the forced-kill gate.

    A turn allows one play per piece the current player still has. When that
    cap is reached and a kill is available, the turn is held until the kill
    is made.
    """

    def __init__(
        self, board: BoardState, rules: RulesConfig, loss_condition: LossCondition
    ) -> None:
        self.board = board
        self.rules = rules
        self.loss_condition = loss_condition
        self.current_player_index = 0
        self.moves_this_turn = 0
        self.waiting_for_forced_kill = False
        self.last_moved_piece: Piece | None = None
        self.turn_number = 1

    @property
    def current_player(self) -> Player:
        return self.board.players[self.current_player_index]

    @property
    def phase(self) -> TurnPhase:
        if self.waiting_for_forced_kill:
            return TurnPhase.AWAITING_FORCED_KILL
        return TurnPhase.AWAITING_PLAY

    def start(self) -> None:
        self.board.bus.emit(TurnChanged(self.board.id, self.current_player.id))

    def register_play(self, moved_piece: Piece | None = None) -> None:
        self.moves_this_turn += 1
        self.last_moved_piece = moved_piece
        player = self.current_player
        if self.moves_this_turn != len(player.roster):
            return
        if self.board.killable_slots_for_player(player):
            logger.debug("player %s must kill before the turn ends", player.id)
            self.waiting_for_forced_kill = True
            return
        self.advance_turn()

    def advance_turn(self) -> None:
        self.moves_this_turn = 0
        self.last_moved_piece = None
        self.waiting_for_forced_kill = False
        self.current_player_index = self._next_index()
        self.turn_number += 1
        self.check_loss_condition()
        if self.current_player.has_lost and not self.board.finished:
            self.current_player_index = self._next_index()
        self.start()

    def _next_index(self) -> int:
        n = self.rules.required_player_count
        idx = self.current_player_index
        for step in range(1, n + 1):
            candidate = (idx + step) % n
            if not self.board.players[candidate].has_lost:
                return candidate
        return (idx + 1) % n

    def is_piece_moveable(self, piece: Piece) -> bool:
        last = self.last_moved_piece
        if self.rules.can_move_piece_multiple_times or last is None:
            return True
        return piece.id != last.id and (
            piece.spawn_offset != last.spawn_offset or piece.kind != last.kind
        )

    def check_loss_condition(self) -> Player | None:
        """Flag the first player (in order) who meets the loss condition."""
        loser = next(
            (
                p
                for p in self.board.players
                if not p.has_lost and self.loss_condition.has_lost(self.board, p)
            ),
            None,
        )
        if loser is None:
            return None

        logger.info("player %s lost game %s", loser.id, self.board.id)
        self.board.on_player_lost(loser)
        self.board.bus.emit(PlayerLost(self.board.id, loser.id))
        self.board.broadcast_board_update()
        self.board.bus.emit(PlayersChanged(self.board.id))
        self.board.check_winner()
        return loser
