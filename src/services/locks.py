"""Per-game mutual exclusion: commands for one game are applied one at a time, in the order they arrive."""

import threading
from contextlib import contextmanager
from typing import Generator
from uuid import UUID


class GameLocks:
    """One lock per game ID, created on first use."""

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: dict[UUID, threading.Lock] = {}

    def _lock_for(self, game_id: UUID) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = self._locks[game_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, game_id: UUID) -> Generator[None, None, None]:
        with self._lock_for(game_id):
            yield

    def discard(self, game_id: UUID) -> None:
        """Forget the lock of a deleted game."""
        with self._registry_lock:
            self._locks.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._locks)
