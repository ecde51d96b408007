from __future__ import annotations

import logging

from . import storage
from .events import CommandEvent, EventBus, GameEnded, PlayerLost, event_bus
from .models.api import CommandLogEntry
from .models.enums import CommandResult

logger = logging.getLogger("skirmish.commands")


def _on_command_event(ev: CommandEvent) -> None:
    entry = CommandLogEntry(
        game_id=ev.game_id,
        turn=ev.turn,
        player_id=ev.player_id,
        command=ev.command,
        result=ev.result,
        message=ev.message,
        error_kind=ev.error_kind,
    )
    storage.logs.append(ev.game_id, entry)
    if ev.result == CommandResult.APPLIED:
        logger.info("[%s] %s %s", ev.game_id, ev.player_id, ev.command.kind)
    elif ev.result == CommandResult.ILLEGAL:
        logger.info("[%s] rejected %s from %s: %s", ev.game_id, ev.command.kind, ev.player_id, ev.message)
    else:
        logger.error("[%s] %s from %s failed: %s", ev.game_id, ev.command.kind, ev.player_id, ev.message)


def _on_player_lost(ev: PlayerLost) -> None:
    logger.info("[%s] player %s lost", ev.game_id, ev.player_id)


def _on_game_ended(ev: GameEnded) -> None:
    logger.info("[%s] game over, winner %s", ev.game_id, ev.winner_id)


def register_listeners(bus: EventBus = event_bus) -> None:
    bus.subscribe(CommandEvent, _on_command_event)
    bus.subscribe(PlayerLost, _on_player_lost)
    bus.subscribe(GameEnded, _on_game_ended)
