"""
Session-tier score cache.

In-memory, capacity-bounded, per-entry TTL measured from insertion. Overflow
evicts the oldest-inserted entry (FIFO, not LRU). Expiry is checked lazily on
lookup against an injectable clock.

Key: SessionScoreCache with get/set/clear/size and telemetry counters.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from cachetools import FIFOCache

from contentlens.config import SESSION_CACHE_MAX_ENTRIES, SESSION_CACHE_TTL_SECONDS
from contentlens.contracts.types import ScoreCacheEntry
from contentlens.observability.telemetry import counter, log_event


class _CountingFIFOCache(FIFOCache):
    """FIFOCache that counts overflow evictions."""

    def __init__(self, maxsize: int, name: str):
        super().__init__(maxsize=maxsize)
        self._name = name

    def popitem(self):
        key, value = super().popitem()
        counter(f"cache.{self._name}.evict")
        return key, value


class SessionScoreCache:
    """Fast per-page lookup in front of the durable tier."""

    def __init__(
        self,
        max_entries: int = SESSION_CACHE_MAX_ENTRIES,
        ttl_seconds: float = SESSION_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        name: str = "session",
    ):
        """
        Args:
            max_entries: Capacity; the oldest-inserted entry is evicted beyond it
            ttl_seconds: Lifetime of each entry from insertion
            clock: Time source in seconds (tests inject a fake)
            name: Cache name for telemetry counters
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: _CountingFIFOCache = _CountingFIFOCache(max_entries, name)

    def get(self, key: str) -> int | None:
        """Cached score, or None if absent or expired."""
        entry: ScoreCacheEntry | None = self._store.get(key)
        if entry is None:
            counter(f"cache.{self.name}.miss")
            return None

        if entry.is_expired(self._clock()):
            del self._store[key]
            counter(f"cache.{self.name}.expired")
            return None

        counter(f"cache.{self.name}.hit")
        return entry.score

    def set(self, key: str, score: int) -> None:
        """
        Store a score. Re-setting a key restarts its TTL and makes it newest.

        Side Effects:
            - May evict the oldest-inserted entry
            - Increments telemetry counter (cache.{name}.write)
        """
        self._store[key] = ScoreCacheEntry(
            content_key=key,
            score=score,
            inserted_at=self._clock(),
            ttl=self.ttl_seconds,
        )
        counter(f"cache.{self.name}.write")

    def clear(self) -> None:
        count = len(self._store)
        # MutableMapping.clear() would go through popitem() and count evictions
        self._store = _CountingFIFOCache(self.max_entries, self.name)
        log_event("cache.cleared", cache=self.name, count=count)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, entry in self._store.items() if entry.is_expired(now)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def size(self) -> int:
        """Live (unexpired) entry count."""
        self.purge_expired()
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        entry = self._store.get(key)
        return entry is not None and not entry.is_expired(self._clock())
