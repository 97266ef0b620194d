"""Tests for the persisted key/value stores and lock retries."""

import sqlite3
from contextlib import closing
from unittest.mock import patch

import pytest

from contentlens.infrastructure.store import MemoryStore, SqliteStore, retry_on_db_lock
from contentlens.observability.telemetry import get_counter


@pytest.mark.asyncio
async def test_memory_store_round_trips_json_values():
    store = MemoryStore()
    value = {"a": 1}

    await store.set("k", value)
    value["a"] = 2

    assert await store.get("k") == {"a": 1}
    await store.remove("k")
    assert await store.get("k") is None
    await store.remove("k")


@pytest.mark.asyncio
async def test_sqlite_store_persists_across_instances(tmp_path):
    db = tmp_path / "nested" / "contentlens.db"
    store = SqliteStore(db)

    await store.set("cl_score_cache", {"abcd0123": 7})
    await store.set("cl_score_cache", {"abcd0123": 8})

    reopened = SqliteStore(db)
    assert await reopened.get("cl_score_cache") == {"abcd0123": 8}
    await reopened.remove("cl_score_cache")
    assert await store.get("cl_score_cache") is None


@pytest.mark.asyncio
async def test_sqlite_store_reports_corrupt_value_as_absent(tmp_path):
    db = tmp_path / "kv.db"
    store = SqliteStore(db)
    with closing(sqlite3.connect(db)) as conn, conn:
        conn.execute("INSERT INTO kv (key, value) VALUES ('k', '{not json')")

    assert await store.get("k") is None
    assert get_counter("store.corrupt_value") == 1


@pytest.mark.asyncio
async def test_retry_on_db_lock_retries_then_succeeds():
    calls = []

    @retry_on_db_lock(max_retries=3, base_delay=0.001, max_delay=0.002)
    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise sqlite3.OperationalError("database is locked")
        return "ok"

    assert await flaky() == "ok"
    assert len(calls) == 3
    assert get_counter("store.lock_retry") == 2


@pytest.mark.asyncio
async def test_retry_on_db_lock_gives_up():
    @retry_on_db_lock(max_retries=2, base_delay=0.001, max_delay=0.001)
    async def always_busy():
        raise sqlite3.OperationalError("database is busy")

    with pytest.raises(sqlite3.OperationalError):
        await always_busy()
    assert get_counter("store.lock_retry") == 2


@pytest.mark.asyncio
async def test_retry_on_db_lock_ignores_other_errors():
    @retry_on_db_lock(max_retries=5)
    async def broken():
        raise sqlite3.OperationalError("no such table: kv")

    with patch("contentlens.infrastructure.store.asyncio.sleep") as sleep:
        with pytest.raises(sqlite3.OperationalError):
            await broken()
    sleep.assert_not_called()
