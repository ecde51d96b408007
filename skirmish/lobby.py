"""Waiting room and in-memory registry of running games."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import RulesConfig, player_origins
from .engine.board import BoardState
from .errors import ConfigurationError, InitializationError
from .events import EventBus, event_bus
from .models.pieces import default_roster
from .models.player import Player, PlayerOrigin

logger = logging.getLogger(__name__)


@dataclass
class JoinResult:
    board: BoardState | None = None
    started: bool = False
    reconnected: bool = False


class Lobby:
    def __init__(self, rules: RulesConfig | None = None, bus: EventBus | None = None) -> None:
        self.rules = rules or RulesConfig()
        self.bus = bus or event_bus
        self.waiting: list[Player] = []
        self.games: dict[str, BoardState] = {}
        self._player_games: dict[str, str] = {}

    def join(self, player_id: str, name: str) -> JoinResult:
        board = self.game_for_player(player_id)
        if board is not None:
            logger.info("player %s reconnected to game %s", player_id, board.id)
            return JoinResult(board=board, reconnected=True)

        if any(p.id == player_id for p in self.waiting):
            return JoinResult()

        self.waiting.append(
            Player(
                id=player_id,
                name=name,
                roster=default_roster(player_id, self.rules.board_size),
                origin=self._free_origin(),
            )
        )
        logger.info(
            "player %s waiting (%d/%d)",
            player_id,
            len(self.waiting),
            self.rules.required_player_count,
        )
        if len(self.waiting) < self.rules.required_player_count:
            return JoinResult()
        return JoinResult(board=self.start_game(), started=True)

    def _free_origin(self) -> PlayerOrigin:
        # corners of players who left the room are handed out again
        taken = {(p.origin.x, p.origin.y) for p in self.waiting}
        return next(
            o for o in player_origins(self.rules.board_size) if (o.x, o.y) not in taken
        )

    def leave(self, player_id: str) -> None:
        self.waiting = [p for p in self.waiting if p.id != player_id]

    def start_game(self) -> BoardState:
        players = list(self.waiting)
        self.waiting.clear()
        board = BoardState(self.rules, bus=self.bus)
        # registered before init so listeners can resolve the board
        self.games[board.id] = board
        for p in players:
            self._player_games[p.id] = board.id
        try:
            board.init(players)
        except (ConfigurationError, InitializationError):
            logger.exception("could not start game %s", board.id)
            self.end_game(board.id)
            raise
        return board

    def get(self, game_id: str) -> BoardState | None:
        return self.games.get(game_id)

    def game_for_player(self, player_id: str) -> BoardState | None:
        gid = self._player_games.get(player_id)
        return self.games.get(gid) if gid else None

    def end_game(self, game_id: str) -> None:
        board = self.games.pop(game_id, None)
        if board is None:
            return
        self._player_games = {
            pid: gid for pid, gid in self._player_games.items() if gid != game_id
        }
        board.teardown()
        logger.info("game %s closed", game_id)
