"""Tests for the session-tier score cache."""

import pytest

from contentlens.observability.telemetry import get_counter
from contentlens.storage.session_cache import SessionScoreCache


def test_set_then_get(session_cache):
    session_cache.set("00000001", 7)
    assert session_cache.get("00000001") == 7
    assert session_cache.size() == 1
    assert get_counter("cache.session.hit") == 1


def test_missing_key(session_cache):
    assert session_cache.get("deadbeef") is None
    assert get_counter("cache.session.miss") == 1


def test_entry_expires_after_ttl(clock):
    cache = SessionScoreCache(ttl_seconds=60, clock=clock)
    cache.set("k", 3)

    clock.advance(60)
    assert cache.get("k") == 3

    clock.advance(1)
    assert cache.get("k") is None
    assert "k" not in cache
    assert get_counter("cache.session.expired") == 1


def test_size_ignores_expired_entries(clock):
    cache = SessionScoreCache(ttl_seconds=10, clock=clock)
    cache.set("old", 1)
    clock.advance(8)
    cache.set("new", 2)
    clock.advance(5)

    assert cache.size() == 1
    assert cache.get("new") == 2


def test_overflow_evicts_oldest_inserted(clock):
    cache = SessionScoreCache(max_entries=3, clock=clock)
    for i, key in enumerate(["a", "b", "c"]):
        cache.set(key, i + 1)

    # Reading does not refresh position (not LRU)
    assert cache.get("a") == 1
    cache.set("d", 4)

    assert cache.get("a") is None
    assert [cache.get(k) for k in ("b", "c", "d")] == [2, 3, 4]
    assert get_counter("cache.session.evict") == 1


def test_resetting_a_key_restarts_its_ttl(clock):
    cache = SessionScoreCache(ttl_seconds=10, clock=clock)
    cache.set("k", 5)
    clock.advance(8)
    cache.set("k", 5)
    clock.advance(8)
    assert cache.get("k") == 5


def test_clear(session_cache):
    for key in ("a", "b"):
        session_cache.set(key, 2)

    session_cache.clear()

    assert session_cache.size() == 0
    assert session_cache.get("a") is None
    assert get_counter("cache.session.evict") == 0


@pytest.mark.parametrize("kwargs", [{"max_entries": 0}, {"ttl_seconds": 0}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        SessionScoreCache(**kwargs)
