from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from .enums import CommandResult, PieceKind

# ----- Inbound commands (discriminated union on "kind") -----


class HandshakeCommand(BaseModel):
    kind: Literal["handshake"] = "handshake"
    player_id: str
    name: str = "player"


class MoveCommand(BaseModel):
    kind: Literal["move"] = "move"
    # filled in by the server from the connection's handshake
    player_id: str | None = None
    from_x: int
    from_y: int
    to_x: int
    to_y: int


class KillCommand(BaseModel):
    kind: Literal["kill"] = "kill"
    player_id: str | None = None
    x: int
    y: int


Command = MoveCommand | KillCommand
InboundMessage = Annotated[
    HandshakeCommand | MoveCommand | KillCommand, Field(discriminator="kind")
]


# ----- Views -----


class PieceView(BaseModel):
    owner_id: str
    kind: PieceKind
    name: str
    kill_range: float


class SlotView(BaseModel):
    x: int
    y: int
    piece: PieceView | None = None


class PlayerView(BaseModel):
    id: str
    name: str
    pieces: int


class GameSummary(BaseModel):
    id: str
    players: list[PlayerView]
    current_player_id: str | None = None
    phase: str
    turn: int
    winner_id: str | None = None
    finished: bool = False


# ----- Outbound messages -----


class BoardMessage(BaseModel):
    kind: Literal["board"] = "board"
    revealed: list[SlotView]
    killable: list[SlotView]
    own: list[SlotView] = Field(default_factory=list)


class PlayersMessage(BaseModel):
    kind: Literal["players"] = "players"
    players: list[PlayerView]


class TurnMessage(BaseModel):
    kind: Literal["turn"] = "turn"
    player_id: str


class LostMessage(BaseModel):
    kind: Literal["lost"] = "lost"


class GameOverMessage(BaseModel):
    kind: Literal["game_over"] = "game_over"
    winner_id: str | None = None


class WaitingMessage(BaseModel):
    kind: Literal["waiting"] = "waiting"
    waiting: int
    required: int


class ErrorMessage(BaseModel):
    kind: Literal["error"] = "error"
    error_kind: str
    reason: str
    detail: str


OutboundMessage = (
    BoardMessage
    | PlayersMessage
    | TurnMessage
    | LostMessage
    | GameOverMessage
    | WaitingMessage
    | ErrorMessage
)


# ----- Command log -----


class CommandLogEntry(BaseModel):
    ts: datetime = Field(default_factory=datetime.now)
    game_id: str
    turn: int
    player_id: str | None = None
    command: Command
    result: CommandResult = CommandResult.APPLIED
    message: str | None = None
    error_kind: str | None = None


class CommandLogResponse(BaseModel):
    entries: list[CommandLogEntry]
