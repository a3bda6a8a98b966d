"""Thread-safe TTL cache for optimization results."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from ...models.domain import CacheEntry, OptimizationResult

logger = logging.getLogger(__name__)


class RouteCache:
    """Map of route key to result, guarded by a single lock.

    Expired entries are never returned but stay in the map until
    ``cleanup`` runs.
    """

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def put(self, key: str, payload: OptimizationResult, ttl_seconds: float | None = None) -> CacheEntry:
        entry = CacheEntry(
            key=key,
            payload=payload,
            timestamp=self._clock(),
            ttl_seconds=ttl_seconds if ttl_seconds is not None else self.ttl_seconds,
        )
        with self._lock:
            self._entries[key] = entry
        return entry

    def put_if_absent(self, key: str, payload: OptimizationResult) -> bool:
        """Store ``payload`` unless a live entry already exists. Returns True if stored."""
        with self._lock:
            now = self._clock()
            current = self._entries.get(key)
            if current is not None and not current.is_expired(now):
                return False
            self._entries[key] = CacheEntry(key=key, payload=payload, timestamp=now, ttl_seconds=self.ttl_seconds)
            return True

    def get(self, key: str) -> OptimizationResult | None:
        with self._lock:
            entry = self._entries.get(key)
            now = self._clock()
        if entry is None or entry.is_expired(now):
            return None
        return entry.payload

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def cleanup(self) -> int:
        """Remove expired entries and return how many were dropped."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Removed {len(expired)} expired route cache entries")
        return len(expired)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
