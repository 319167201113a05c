"""In-memory game store, one GameState per room."""

import threading
from typing import Dict, Optional

from unoroom.engine import GameState


class RoomRegistry:
    """Keyed store of game states.

    No transactions: callers hold ``lock(room_id)`` across a
    load-mutate-save cycle so actions on one room run one at a time.
    """

    def __init__(self) -> None:
        self._games: Dict[str, GameState] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    @staticmethod
    def _key(room_id: str) -> str:
        return room_id.upper()

    def get(self, room_id: str) -> Optional[GameState]:
        return self._games.get(self._key(room_id))

    def save(self, state: GameState) -> None:
        self._games[self._key(state.room_id)] = state

    def delete(self, room_id: str) -> None:
        key = self._key(room_id)
        self._games.pop(key, None)
        with self._guard:
            self._locks.pop(key, None)

    def lock(self, room_id: str) -> threading.RLock:
        key = self._key(room_id)
        with self._guard:
            if key not in self._locks:
                self._locks[key] = threading.RLock()
            return self._locks[key]

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, room_id: str) -> bool:
        return self._key(room_id) in self._games
