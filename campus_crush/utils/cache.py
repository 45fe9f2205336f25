"""
In-process TTL cache.

Used for data that is read on every page load but changes rarely:
- list of colleges
- per-college leaderboards (invalidated when a new rating lands)

Each worker process has its own copy; entries simply expire.
"""

import threading
import time
from typing import Any, Dict, Optional, Tuple

DEFAULT_TTL_SECONDS = 5 * 60


class TTLCache:
    """Dict with per-entry expiry. Expired entries are evicted on read."""

    def __init__(self, default_ttl: float = DEFAULT_TTL_SECONDS, clock=time.monotonic):
        self._data: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.default_ttl = default_ttl

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        expires = self._clock() + (self.default_ttl if ttl is None else ttl)
        with self._lock:
            self._data[key] = (value, expires)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            value, expires = item
            if self._clock() > expires:
                del self._data[key]
                return None
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._data if k.startswith(prefix)]
            for k in keys:
                del self._data[k]
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def cleanup(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expires) in self._data.items() if now > expires]
            for k in expired:
                del self._data[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


# Cache key generators (avoid typos)
class CacheKeys:
    @staticmethod
    def colleges() -> str:
        return "colleges:all"

    @staticmethod
    def leaderboard(college_id: int, period: str) -> str:
        return f"leaderboard:{college_id}:{period}"

    @staticmethod
    def leaderboard_prefix(college_id: int) -> str:
        return f"leaderboard:{college_id}:"


# Shared instance for the app
cache = TTLCache()
