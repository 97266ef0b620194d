"""
Pytest configuration for ContentLens tests

Provides fresh cache tiers, an in-memory store, a page document factory and a
recording renderer. Telemetry is reset before every test so counter
assertions only see that test's activity.
"""

from __future__ import annotations

import pytest

from contentlens.contracts.settings import ExtensionSettings
from contentlens.dom.document import PageDocument
from contentlens.infrastructure.store import MemoryStore
from contentlens.observability.telemetry import reset_telemetry
from contentlens.storage.durable_cache import DurableScoreCache
from contentlens.storage.session_cache import SessionScoreCache
from contentlens.storage.settings_store import SettingsStore


class FakeClock:
    """Manually advanced time source for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingRenderer:
    """Renderer double that records every callback."""

    def __init__(self):
        self.scored = []
        self.settings: ExtensionSettings | None = None
        self.resets = 0

    def on_scored(self, element, score):
        self.scored.append((element, score))

    def update_settings(self, settings):
        self.settings = settings

    def reset(self):
        self.resets += 1

    def scores_for(self, element) -> list[int]:
        return [score for el, score in self.scored if el is element]


@pytest.fixture(autouse=True)
def _reset_telemetry():
    reset_telemetry()
    yield
    reset_telemetry()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def session_cache(clock):
    return SessionScoreCache(clock=clock)


@pytest.fixture
def durable_cache(memory_store):
    return DurableScoreCache(memory_store)


@pytest.fixture
def settings_store(memory_store):
    return SettingsStore(memory_store)


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def make_page():
    """Build a PageDocument from a body fragment and a URL."""

    def _make(body: str, url: str = "https://example.com/thread/1") -> PageDocument:
        return PageDocument(f"<html><head><title>t</title></head><body>{body}</body></html>", url=url)

    return _make
