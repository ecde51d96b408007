from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import TypeAdapter, ValidationError

from . import storage
from .config import RulesConfig, load_rules
from .engine.core import GameEngine
from .engine.views import board_snapshot, game_summary, players_view
from .errors import GameError
from .events import (
    BoardChanged,
    EventBus,
    GameEnded,
    PlayerLost,
    PlayersChanged,
    TurnChanged,
    event_bus,
)
from .lobby import Lobby
from .logging_listeners import register_listeners
from .models.api import (
    CommandLogResponse,
    ErrorMessage,
    GameOverMessage,
    GameSummary,
    HandshakeCommand,
    InboundMessage,
    KillCommand,
    LostMessage,
    MoveCommand,
    OutboundMessage,
    TurnMessage,
    WaitingMessage,
)
from .models.pieces import Piece

logger = logging.getLogger(__name__)

inbound = TypeAdapter(InboundMessage)


class Hub:
    """Routes board events to the sockets of the players they concern.

    Bus handlers run synchronously inside engine calls, so they only queue
    messages; ``flush`` sends them once the command has finished.
    """

    def __init__(self, lobby: Lobby, bus: EventBus) -> None:
        self.lobby = lobby
        self.connections: dict[str, WebSocket] = {}
        self.pending: list[tuple[str, OutboundMessage]] = []
        self.ended: list[str] = []
        self.locks: dict[str, asyncio.Lock] = {}
        self._send_lock = asyncio.Lock()
        bus.subscribe(BoardChanged, self._on_board_changed)
        bus.subscribe(PlayersChanged, self._on_players_changed)
        bus.subscribe(TurnChanged, self._on_turn_changed)
        bus.subscribe(PlayerLost, self._on_player_lost)
        bus.subscribe(GameEnded, self._on_game_ended)

    def lock_for(self, game_id: str) -> asyncio.Lock:
        return self.locks.setdefault(game_id, asyncio.Lock())

    def queue(self, player_id: str, message: OutboundMessage) -> None:
        self.pending.append((player_id, message))

    def _on_board_changed(self, ev: BoardChanged) -> None:
        board = self.lobby.get(ev.game_id)
        if board is None:
            return
        for p in board.players:
            if not p.has_lost:
                self.queue(p.id, board_snapshot(board, p))

    def _on_players_changed(self, ev: PlayersChanged) -> None:
        board = self.lobby.get(ev.game_id)
        if board is None:
            return
        message = players_view(board)
        for p in board.players:
            self.queue(p.id, message)

    def _on_turn_changed(self, ev: TurnChanged) -> None:
        board = self.lobby.get(ev.game_id)
        if board is None:
            return
        for p in board.players:
            self.queue(p.id, TurnMessage(player_id=ev.player_id))

    def _on_player_lost(self, ev: PlayerLost) -> None:
        self.queue(ev.player_id, LostMessage())

    def _on_game_ended(self, ev: GameEnded) -> None:
        board = self.lobby.get(ev.game_id)
        if board is None:
            return
        for p in board.players:
            self.queue(p.id, GameOverMessage(winner_id=ev.winner_id))
        # closed after the current command unwinds
        self.ended.append(ev.game_id)

    async def flush(self) -> None:
        # one flush at a time, so each player gets frames in queue order
        async with self._send_lock:
            pending, self.pending = self.pending, []
            try:
                for player_id, message in pending:
                    ws = self.connections.get(player_id)
                    if ws is None:
                        continue
                    try:
                        await ws.send_text(message.model_dump_json())
                    except (WebSocketDisconnect, RuntimeError, OSError):
                        logger.info("dropping dead connection of player %s", player_id)
                        self.connections.pop(player_id, None)
            finally:
                ended, self.ended = self.ended, []
                for game_id in ended:
                    self.lobby.end_game(game_id)
                    self.locks.pop(game_id, None)

    def disconnect(self, player_id: str | None, ws: WebSocket) -> None:
        if player_id is None:
            return
        if self.connections.get(player_id) is ws:
            del self.connections[player_id]
        self.lobby.leave(player_id)


def create_app(rules: RulesConfig | None = None, bus: EventBus | None = None) -> FastAPI:
    rules = rules or load_rules()
    bus = bus or event_bus
    lobby = Lobby(rules, bus)
    hub = Hub(lobby, bus)
    engine = GameEngine()
    register_listeners(bus)

    app = FastAPI(title="Skirmish - fog of war grid game")
    app.state.lobby = lobby
    app.state.hub = hub
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "ok": True,
            "storage": "memory",
            "games": len(lobby.games),
            "waiting": len(lobby.waiting),
        }

    @app.get("/info")
    def info():
        """Rules in force plus schema and example of each inbound message."""
        return {
            "rules": rules.model_dump(mode="json"),
            "pieces": {"schema": Piece.model_json_schema()},
            "messages": {
                "handshake": {
                    "schema": HandshakeCommand.model_json_schema(),
                    "example": HandshakeCommand(player_id="p1").model_dump(mode="json"),
                },
                "move": {
                    "schema": MoveCommand.model_json_schema(),
                    "example": MoveCommand(from_x=0, from_y=0, to_x=1, to_y=0).model_dump(
                        mode="json", exclude={"player_id"}
                    ),
                },
                "kill": {
                    "schema": KillCommand.model_json_schema(),
                    "example": KillCommand(x=0, y=0).model_dump(
                        mode="json", exclude={"player_id"}
                    ),
                },
            },
        }

    @app.get("/games", response_model=list[GameSummary])
    def list_games():
        return [game_summary(b) for b in lobby.games.values()]

    @app.get("/games/{gid}", response_model=GameSummary)
    def get_game(gid: str):
        board = lobby.get(gid)
        if not board:
            raise HTTPException(404, "game not found")
        return game_summary(board)

    @app.get("/games/{gid}/log", response_model=CommandLogResponse)
    def get_command_log(gid: str, limit: int = Query(50, ge=1, le=1000)):
        # finished games are gone from the lobby but keep their log
        entries = storage.logs.list(gid, limit)
        if not entries and lobby.get(gid) is None:
            raise HTTPException(404, "game not found")
        return CommandLogResponse(entries=entries)

    async def send_error(ws: WebSocket, kind: str, reason: str, detail: str) -> None:
        msg = ErrorMessage(error_kind=kind, reason=reason, detail=detail)
        await ws.send_text(msg.model_dump_json())

    async def handshake(ws: WebSocket, msg: HandshakeCommand) -> None:
        hub.connections[msg.player_id] = ws
        try:
            joined = lobby.join(msg.player_id, msg.name)
        except GameError as e:
            await send_error(ws, e.kind, e.reason, e.detail)
            await hub.flush()
            return
        if joined.board is None:
            waiting = WaitingMessage(
                waiting=len(lobby.waiting), required=rules.required_player_count
            )
            for p in lobby.waiting:
                hub.queue(p.id, waiting)
        elif joined.reconnected:
            board = joined.board
            player = board.player_by_id(msg.player_id)
            if player is not None and not player.has_lost:
                hub.queue(player.id, board_snapshot(board, player))
            hub.queue(msg.player_id, players_view(board))
            hub.queue(msg.player_id, TurnMessage(player_id=board.turn.current_player.id))
        await hub.flush()

    @app.websocket("/ws")
    async def play(ws: WebSocket):
        await ws.accept()
        player_id: str | None = None
        try:
            while True:
                raw = await ws.receive_text()
                try:
                    msg = inbound.validate_json(raw)
                except ValidationError as e:
                    await send_error(ws, "bad_request", "invalid_message", str(e))
                    continue

                if isinstance(msg, HandshakeCommand):
                    player_id = msg.player_id
                    await handshake(ws, msg)
                    continue
                if player_id is None:
                    await send_error(
                        ws, "bad_request", "handshake_required", "Send a handshake first"
                    )
                    continue
                board = lobby.game_for_player(player_id)
                if board is None:
                    await send_error(
                        ws, "bad_request", "no_game", "Waiting for the game to start"
                    )
                    continue

                command = msg.model_copy(update={"player_id": player_id})
                async with hub.lock_for(board.id):
                    try:
                        engine.process(board, command)
                    except GameError as e:
                        hub.queue(
                            player_id,
                            ErrorMessage(error_kind=e.kind, reason=e.reason, detail=e.detail),
                        )
                    await hub.flush()
        except WebSocketDisconnect:
            logger.info("player %s disconnected", player_id)
            hub.disconnect(player_id, ws)

    return app


app = create_app()
