"""Persisted key/value storage

The durable score cache and the settings blob live under namespaced keys in a
flat key -> JSON value store, the same layout the browser extension keeps in
its local storage area:

    cl_settings             {"enabled": true, "threshold": 7, ...}
    cl_score_cache          {"1a2b3c4d": 8, ...}
    cl_score_cache_version  "1"

Provides:
- KeyValueStore protocol (async get/set/remove)
- MemoryStore for tests and one-shot CLI runs
- SqliteStore backed by a single `kv` table, with lock retries

Values are JSON round-tripped on every write so callers never share mutable
state with the store.
"""

from __future__ import annotations

import asyncio
import json
import random
import sqlite3
from collections.abc import Awaitable, Callable
from contextlib import closing
from functools import wraps
from pathlib import Path
from typing import Any, Protocol, TypeVar

from contentlens.config import (
    DB_CONNECT_TIMEOUT,
    DB_PATH,
    DB_RETRY_BASE_DELAY,
    DB_RETRY_JITTER,
    DB_RETRY_MAX,
    DB_RETRY_MAX_DELAY,
)
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def remove(self, key: str) -> None: ...


def retry_on_db_lock(
    max_retries: int = DB_RETRY_MAX,
    base_delay: float = DB_RETRY_BASE_DELAY,
    max_delay: float = DB_RETRY_MAX_DELAY,
) -> Callable[[F], F]:
    """
    Decorator to retry async database operations on SQLITE_BUSY errors

    Backs off exponentially with jitter, suspending with asyncio.sleep so other
    page work keeps running while the lock clears.

    Side Effects:
        - Retries wrapped coroutine up to max_retries times on lock errors
        - Logs a warning for each retry and an error when retries are exhausted
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except sqlite3.OperationalError as e:
                    message = str(e).lower()
                    if "locked" not in message and "busy" not in message:
                        raise
                    if attempt >= max_retries:
                        logger.error(
                            "Database lock retry exhausted after %d attempts: %s",
                            max_retries,
                            e,
                        )
                        raise

                    delay = min(base_delay * (2**attempt), max_delay)
                    sleep_time = delay + random.uniform(0, delay * DB_RETRY_JITTER)
                    counter("store.lock_retry")
                    logger.warning(
                        "Database locked (attempt %d/%d), retrying in %.2fs: %s",
                        attempt + 1,
                        max_retries,
                        sleep_time,
                        e,
                    )
                    await asyncio.sleep(sleep_time)
            raise AssertionError("unreachable")

        return wrapper  # type: ignore[return-value]

    return decorator


class MemoryStore:
    """In-process store. Values are serialized like any persisted store."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = json.dumps(value)

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SqliteStore:
    """
    Store backed by one SQLite file.

    Operations are short single-statement transactions on a fresh connection;
    they run inline on the event loop. A row whose value is not valid JSON is
    reported as absent.
    """

    def __init__(self, db_path: Path | str = DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn, conn:
            conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=DB_CONNECT_TIMEOUT)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @retry_on_db_lock()
    async def get(self, key: str) -> Any | None:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            counter("store.corrupt_value")
            logger.warning("Discarding non-JSON value stored under %s", key)
            return None

    @retry_on_db_lock()
    async def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with closing(self._connect()) as conn, conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, payload),
            )

    @retry_on_db_lock()
    async def remove(self, key: str) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
