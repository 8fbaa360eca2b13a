from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

from ...engine.game import Game


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Serialize access to a single game (`Game` is not reentrant-safe)
    - Delete sessions
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Tuple[Game, threading.Lock]] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = Game.new()
        with self._lock:
            self._games[gid] = (game, threading.Lock())
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            entry = self._games.get(game_id)
        return entry[0] if entry is not None else None

    @contextmanager
    def locked(self, game_id: str) -> Iterator[Optional[Game]]:
        """Yield the game (or None) while holding its per-game lock."""
        with self._lock:
            entry = self._games.get(game_id)
        if entry is None:
            yield None
            return
        game, game_lock = entry
        with game_lock:
            yield game

    def delete(self, game_id: str) -> None:
        with self._lock:
            self._games.pop(game_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
