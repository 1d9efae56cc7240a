from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional

from ...engine.game import Game


logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 1000


class InMemorySessionStore:
    """Bounded, thread-safe map of ``game_id`` to live games.

    Games are kept in least-recently-used order; creating a game beyond
    ``max_sessions`` evicts the game that was touched longest ago.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        self.max_sessions = max_sessions
        self._lock = threading.RLock()
        self._games: "OrderedDict[str, Game]" = OrderedDict()

    def create(self, game: Optional[Game] = None) -> str:
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = game if game is not None else Game.new()
            while len(self._games) > self.max_sessions:
                evicted, _ = self._games.popitem(last=False)
                logger.info("evicted idle game %s", evicted)
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            if game is not None:
                self._games.move_to_end(game_id)
            return game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
