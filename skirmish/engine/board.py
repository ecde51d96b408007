from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import uuid4

from ..config import MAX_PLAYERS, RulesConfig
from ..errors import (
    ConfigurationError,
    GameError,
    IllegalKillError,
    IllegalMoveError,
    InitializationError,
    PieceNotPlacedError,
)
from ..events import BoardChanged, EventBus, GameEnded, PlayersChanged, event_bus
from ..models.board import Slot
from ..models.enums import Coord, ZoneKind
from .loss import loss_condition_for
from .turn import TurnController
from .zones import ZoneResolver

if TYPE_CHECKING:
    from ..models.pieces import Piece
    from ..models.player import Player
    from .loss import LossCondition

logger = logging.getLogger(__name__)


class BoardState:
    """Grid, piece placement and the move / kill rules of one game.

    Every command checks all of its preconditions before touching state, so a
    rejected command leaves the board exactly as it was.
    """

    def __init__(
        self,
        rules: RulesConfig | None = None,
        *,
        loss_condition: LossCondition | None = None,
        bus: EventBus | None = None,
        game_id: str | None = None,
    ) -> None:
        self.id = game_id or uuid4().hex
        self.rules = rules or RulesConfig()
        self.bus = bus or event_bus
        self.players: list[Player] = []
        self.rows: list[list[Slot]] = []  # rows[y][x]
        self.slots: list[Slot] = []  # scan order: y outer, x inner
        self.locations: dict[str, Coord] = {}  # piece id -> (x, y)
        self.winner_id: str | None = None
        self.finished = False
        self.turn = TurnController(
            self,
            self.rules,
            loss_condition or loss_condition_for(self.rules.loss_policy),
        )

    # ----- setup -----

    def init(self, players: list[Player]) -> None:
        if self.rows:
            raise ConfigurationError("already_initialized", "Board is already initialized")
        required = self.rules.required_player_count
        if len(players) < required:
            raise ConfigurationError(
                "player_count",
                f"Cannot start a game without {required} players (got {len(players)})",
            )
        if len(players) > MAX_PLAYERS:
            raise ConfigurationError(
                "player_count", f"At most {MAX_PLAYERS} players can join a game"
            )

        rows = self.generate_slots()
        placements = self._compute_placements(players)
        size = self.rules.board_size
        slot_count = sum(len(r) for r in rows)
        if slot_count != size * size:
            raise ConfigurationError(
                "board_size", f"board_size is {size} but the grid has {slot_count} slots"
            )

        self.players = list(players)
        self.rows = rows
        self.slots = [s for r in rows for s in r]
        for (x, y), piece in placements.items():
            rows[y][x].occupant = piece
            self.locations[piece.id] = (x, y)
        logger.info(
            "game %s started with players %s", self.id, [p.id for p in self.players]
        )

        self.broadcast_board_update()
        self.bus.emit(PlayersChanged(self.id))
        self.turn.start()

    def generate_slots(self) -> list[list[Slot]]:
        size = self.rules.board_size
        return [[Slot(x=x, y=y) for x in range(size)] for y in range(size)]

    def _compute_placements(self, players: list[Player]) -> dict[Coord, Piece]:
        size = self.rules.board_size
        placements: dict[Coord, Piece] = {}
        seen: set[str] = set()
        for player in players:
            for piece in player.roster:
                x, y = player.origin.place(piece.spawn_offset)
                if not (0 <= x < size and 0 <= y < size):
                    raise InitializationError(
                        "spawn_off_board",
                        f"Cannot init board: slot ({x}, {y}) is out of board",
                    )
                if (x, y) in placements:
                    raise InitializationError(
                        "spawn_conflict",
                        f"Cannot init board: conflict on slot ({x}, {y})",
                    )
                if piece.id in seen:
                    raise InitializationError(
                        "duplicate_piece", f"Cannot init board: piece {piece.id} listed twice"
                    )
                seen.add(piece.id)
                placements[(x, y)] = piece
        return placements

    def teardown(self) -> None:
        self.players = []
        self.finished = True

    # ----- queries -----

    def is_slot_on_board(self, x: int, y: int) -> bool:
        return 0 <= y < len(self.rows) and 0 <= x < len(self.rows[y])

    def get_slot(self, x: int, y: int) -> Slot | None:
        if not self.is_slot_on_board(x, y):
            return None
        return self.rows[y][x]

    def is_slot_occupied(self, x: int, y: int) -> bool:
        slot = self.get_slot(x, y)
        return slot is not None and slot.occupant is not None

    def all_pieces(self) -> list[Piece]:
        return [piece for p in self.players for piece in p.roster]

    def occupied_slots(self) -> list[Slot]:
        return [s for s in self.slots if s.occupant is not None]

    def player_by_id(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def piece_location(self, piece: Piece) -> Coord:
        loc = self.locations.get(piece.id)
        if loc is None:
            raise PieceNotPlacedError(
                "piece_not_placed", f"Piece {piece.id} ({piece.name}) has no slot"
            )
        return loc

    def _zone(self, piece: Piece, kind: ZoneKind) -> list[Slot]:
        x, y = self.piece_location(piece)
        return ZoneResolver.for_piece(piece).resolve(kind, self.slots, x, y)

    def movable_piece_zone(self, piece: Piece) -> list[Slot]:
        return self._zone(piece, ZoneKind.MOVE)

    def revealed_zone(self, piece: Piece) -> list[Slot]:
        return self._zone(piece, ZoneKind.REVEAL)

    def kill_zone(self, piece: Piece) -> list[Slot]:
        return self._zone(piece, ZoneKind.KILL)

    def revealed_zone_for_player(self, player: Player) -> list[Slot]:
        zone: list[Slot] = []
        seen: set[Coord] = set()
        for piece in player.roster:
            if piece.id not in self.locations:
                continue
            for slot in self.revealed_zone(piece):
                if slot.coord not in seen:
                    seen.add(slot.coord)
                    zone.append(slot)
        return zone

    def killable_slots_for_player(self, player: Player) -> list[Slot]:
        """Enemy-occupied slots some killer can reach and some ally can see."""
        revealed = {s.coord for s in self.revealed_zone_for_player(player)}
        victims: list[Slot] = []
        for killer in player.roster:
            if not killer.can_kill:
                continue
            victims.extend(
                slot
                for slot in self.kill_zone(killer)
                if slot.occupant is not None
                and slot.occupant.owner_id != player.id
                and slot.coord in revealed
            )
        return victims

    def current_player_is(self, player: Player) -> bool:
        return bool(self.players) and self.turn.current_player.id == player.id

    def winner(self) -> Player | None:
        if self.winner_id is None:
            return None
        return self.player_by_id(self.winner_id)

    # ----- commands -----

    def _ensure_started(self, error: type[GameError]) -> None:
        if self.finished:
            raise error("game_over", "Cannot play: game over")
        if not self.players:
            raise error("game_not_started", "Cannot play: game not started")

    def move(self, piece: Piece | None, x: int, y: int) -> None:
        self._ensure_started(IllegalMoveError)
        if self.turn.waiting_for_forced_kill:
            raise IllegalMoveError(
                "waiting_for_kill", "Cannot move: max play count reached, waiting for a kill"
            )
        if piece is None or piece.id not in self.locations:
            raise IllegalMoveError("unknown_piece", "Cannot move: mover not found")
        if not self.turn.is_piece_moveable(piece):
            raise IllegalMoveError(
                "piece_not_moveable", "Cannot move: this piece was just moved"
            )
        owner = self.player_by_id(piece.owner_id)
        if owner is None or not self.current_player_is(owner):
            raise IllegalMoveError("not_your_turn", "Cannot move: wait for player turn")
        if not self.is_slot_on_board(x, y):
            raise IllegalMoveError("off_board", "Cannot move: slot is outside the board")
        if not _contains(self.movable_piece_zone(piece), x, y):
            raise IllegalMoveError(
                "outside_move_zone", "Cannot move: target is outside the piece's move zone"
            )
        if not _contains(self.revealed_zone(piece), x, y):
            raise IllegalMoveError(
                "outside_reveal_zone",
                "Cannot move: trying to move outside piece's revealed zone",
            )
        if self.is_slot_occupied(x, y):
            raise IllegalMoveError("slot_taken", "Cannot move: slot is already taken")

        sx, sy = self.locations[piece.id]
        source = self.rows[sy][sx]
        tracked = source.occupant
        source.occupant = None
        self.rows[y][x].occupant = tracked
        self.locations[piece.id] = (x, y)
        logger.debug("piece %s moved (%s, %s) -> (%s, %s)", piece.id, sx, sy, x, y)

        self.turn.register_play(tracked)
        self.broadcast_board_update()

    def kill(self, player: Player, x: int, y: int) -> None:
        self._ensure_started(IllegalKillError)
        if not self.current_player_is(player):
            raise IllegalKillError("not_your_turn", "Cannot kill: wait for player turn")
        if not _contains(self.killable_slots_for_player(player), x, y):
            raise IllegalKillError(
                "not_killable", f"Cannot kill: {player.id} cannot kill piece at {x},{y}"
            )

        # re-check against the raw grid
        slot = self.get_slot(x, y)
        if slot is None:
            raise IllegalKillError("off_board", "Cannot kill: slot is outside the board")
        victim = slot.occupant
        if victim is None:
            raise IllegalKillError("empty_slot", "Cannot kill: nothing to kill here")
        if not _contains(self.revealed_zone_for_player(player), x, y):
            raise IllegalKillError(
                "not_revealed", "Cannot kill: target is outside the revealed zone"
            )
        if victim.owner_id == player.id:
            raise IllegalKillError("own_piece", "Cannot kill: trying to kill own piece")
        victim_player = self.player_by_id(victim.owner_id)
        if victim_player is None:
            raise IllegalKillError(
                "unknown_victim", "Cannot kill: unable to find targeted player"
            )

        victim_player.roster = [p for p in victim_player.roster if p.id != victim.id]
        slot.occupant = None
        del self.locations[victim.id]
        logger.debug("player %s killed %s at (%s, %s)", player.id, victim.id, x, y)

        if self.rules.count_kill_as_turn_move:
            self.turn.register_play()
        if self.turn.waiting_for_forced_kill:
            self.turn.waiting_for_forced_kill = False
            self.turn.advance_turn()
        self.turn.check_loss_condition()
        self.broadcast_board_update()

    # ----- bookkeeping -----

    def on_player_lost(self, player: Player) -> None:
        player.has_lost = True
        for piece in player.roster:
            loc = self.locations.pop(piece.id, None)
            if loc is not None:
                x, y = loc
                self.rows[y][x].occupant = None
        player.roster = []

    def check_winner(self) -> None:
        if self.finished:
            return
        standing = [p for p in self.players if not p.has_lost]
        if len(standing) > 1:
            return
        self.finished = True
        self.winner_id = standing[0].id if standing else None
        logger.info("game %s over, winner: %s", self.id, self.winner_id)
        self.bus.emit(GameEnded(self.id, self.winner_id))

    def broadcast_board_update(self) -> None:
        self.bus.emit(BoardChanged(self.id))

    def render(self) -> str:
        """Plain-text dump: '.' for empty slots, else the owner's seat number."""
        seats = {p.id: str(i + 1) for i, p in enumerate(self.players)}
        lines = []
        for row in self.rows:
            lines.append(
                " ".join(
                    "." if s.occupant is None else seats.get(s.occupant.owner_id, "?")
                    for s in row
                )
            )
        return "\n".join(lines)


def _contains(zone: list[Slot], x: int, y: int) -> bool:
    return any(s.x == x and s.y == y for s in zone)
