from __future__ import annotations

import os
from collections import OrderedDict, deque

from .models.api import CommandLogEntry

MAX_LOG_ENTRIES = int(os.getenv("SKIRMISH_MAX_LOG_ENTRIES", "500"))
MAX_LOGGED_GAMES = int(os.getenv("SKIRMISH_MAX_LOGGED_GAMES", "100"))


class CommandLog:
    """In-process command history per game, newest last. Lost on restart.

    At most ``max_games`` histories are kept; the game written to least
    recently is evicted first.
    """

    def __init__(
        self, max_entries: int = MAX_LOG_ENTRIES, max_games: int = MAX_LOGGED_GAMES
    ) -> None:
        self.max_entries = max_entries
        self.max_games = max_games
        self._data: OrderedDict[str, deque[CommandLogEntry]] = OrderedDict()

    def append(self, game_id: str, entry: CommandLogEntry) -> None:
        q = self._data.get(game_id)
        if q is None:
            q = self._data[game_id] = deque(maxlen=self.max_entries)
        else:
            self._data.move_to_end(game_id)
        q.append(entry)
        self._enforce_cap()

    def _enforce_cap(self) -> None:
        while len(self._data) > self.max_games:
            self._data.popitem(last=False)

    def list(self, game_id: str, limit: int = 50) -> list[CommandLogEntry]:
        q = self._data.get(game_id)
        if not q:
            return []
        return list(q)[-limit:]

    def drop(self, game_id: str) -> None:
        self._data.pop(game_id, None)


logs = CommandLog()
