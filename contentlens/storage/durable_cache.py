"""
Durable-tier score cache.

A persisted content key -> score map, loaded lazily from a KeyValueStore and
written back on every set. No TTL: scores are deterministic per content key
for a given SCORING_VERSION, so entries stay valid until the version changes.

Capacity is enforced on save by dropping the oldest-inserted keys (insertion
order, not access order). Malformed persisted data is discarded and the cache
starts empty rather than failing. A store that cannot be read or cleared is
logged and counted; the cache then behaves as empty for the rest of the
session.
"""

from __future__ import annotations

import asyncio
from typing import Annotated

from pydantic import Field, TypeAdapter, ValidationError

from contentlens.config import (
    DURABLE_CACHE_MAX_ENTRIES,
    SCORE_CACHE_STORAGE_KEY,
    SCORE_CACHE_VERSION_KEY,
)
from contentlens.infrastructure.store import KeyValueStore
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter, log_event
from contentlens.scoring.scorer import MAX_SCORE, MIN_SCORE, SCORING_VERSION

logger = get_logger(__name__)

_SCORE_MAP = TypeAdapter(dict[str, Annotated[int, Field(ge=MIN_SCORE, le=MAX_SCORE)]])


class DurableScoreCache:
    def __init__(
        self,
        store: KeyValueStore,
        max_entries: int = DURABLE_CACHE_MAX_ENTRIES,
        storage_key: str = SCORE_CACHE_STORAGE_KEY,
        version_key: str = SCORE_CACHE_VERSION_KEY,
        version: str = SCORING_VERSION,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.store = store
        self.max_entries = max_entries
        self.storage_key = storage_key
        self.version_key = version_key
        self.version = version
        self._entries: dict[str, int] | None = None
        self._load_lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    async def load(self) -> dict[str, int]:
        """Load (once) and validate the persisted map."""
        if self._entries is not None:
            return self._entries
        async with self._load_lock:
            if self._entries is None:
                self._entries = await self._read()
                logger.debug("Durable cache loaded: %d entries", len(self._entries))
        return self._entries

    async def _read(self) -> dict[str, int]:
        try:
            raw = await self.store.get(self.storage_key)
            if raw is None:
                return {}
            stored_version = await self.store.get(self.version_key)
        except Exception as e:
            counter("cache.durable.store_error")
            logger.warning("Score cache unreadable, starting empty: %s", e)
            return {}

        if stored_version != self.version:
            counter("cache.durable.version_reset")
            log_event(
                "cache.version_reset",
                stored=stored_version,
                current=self.version,
            )
            return {}

        try:
            entries = _SCORE_MAP.validate_python(raw, strict=True)
        except ValidationError as e:
            counter("cache.durable.malformed")
            logger.warning("Discarding malformed score cache (%d errors)", e.error_count())
            return {}
        return entries

    async def _save(self) -> None:
        entries = self._entries or {}
        overflow = len(entries) - self.max_entries
        if overflow > 0:
            for key in list(entries)[:overflow]:
                del entries[key]
            counter("cache.durable.evict", overflow)
        await self.store.set(self.storage_key, entries)
        await self.store.set(self.version_key, self.version)

    async def get(self, key: str) -> int | None:
        entries = await self.load()
        score = entries.get(key)
        counter("cache.durable.hit" if score is not None else "cache.durable.miss")
        return score

    async def set(self, key: str, score: int) -> None:
        """
        Insert and persist.

        Side Effects:
            - Writes the whole map and the version marker to the store
            - Drops the oldest-inserted entries beyond max_entries
        """
        entries = await self.load()
        entries[key] = score
        counter("cache.durable.write")
        try:
            await self._save()
        except Exception as e:
            # Entry stays in memory; the next successful save persists it
            counter("cache.durable.store_error")
            logger.warning("Could not persist score cache: %s", e)

    async def clear(self) -> None:
        count = len(self._entries or {})
        self._entries = {}
        try:
            await self.store.remove(self.storage_key)
        except Exception as e:
            counter("cache.durable.store_error")
            logger.warning("Could not remove persisted score cache: %s", e)
            return
        log_event("cache.cleared", cache="durable", count=count)

    def size(self) -> int:
        """In-memory entry count; 0 until the first load. See count()."""
        return len(self._entries or {})

    async def count(self) -> int:
        """Persisted entry count, loading the map first if needed."""
        return len(await self.load())

    def __contains__(self, key: str) -> bool:
        return self._entries is not None and key in self._entries
