"""Per-player projections of a board: what each seat is allowed to see."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models.api import (
    BoardMessage,
    GameSummary,
    PieceView,
    PlayersMessage,
    PlayerView,
    SlotView,
)

if TYPE_CHECKING:
    from ..models.board import Slot
    from ..models.pieces import Piece
    from ..models.player import Player
    from .board import BoardState


def piece_view(piece: Piece | None) -> PieceView | None:
    if piece is None:
        return None
    return PieceView(
        owner_id=piece.owner_id,
        kind=piece.kind,
        name=piece.name,
        kill_range=piece.kill_zone.range,
    )


def slot_view(slot: Slot) -> SlotView:
    return SlotView(x=slot.x, y=slot.y, piece=piece_view(slot.occupant))


def board_snapshot(board: BoardState, player: Player) -> BoardMessage:
    revealed = board.revealed_zone_for_player(player)
    killable = board.killable_slots_for_player(player)
    own = [board.get_slot(*board.piece_location(p)) for p in player.roster]
    return BoardMessage(
        revealed=[slot_view(s) for s in revealed],
        killable=[slot_view(s) for s in killable],
        own=[slot_view(s) for s in own if s is not None],
    )


def players_view(board: BoardState) -> PlayersMessage:
    return PlayersMessage(
        players=[
            PlayerView(id=p.id, name=p.name, pieces=len(p.roster))
            for p in board.players
            if not p.has_lost
        ]
    )


def game_summary(board: BoardState) -> GameSummary:
    return GameSummary(
        id=board.id,
        players=[
            PlayerView(id=p.id, name=p.name, pieces=len(p.roster)) for p in board.players
        ],
        current_player_id=board.turn.current_player.id if board.players else None,
        phase=board.turn.phase.value,
        turn=board.turn.turn_number,
        winner_id=board.winner_id,
        finished=board.finished,
    )
