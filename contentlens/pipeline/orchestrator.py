"""
Orchestrator: candidate -> cached or fresh score -> renderer callback.

Flow for one TextBlock:

    session tier hit? ──yes──────────────────────────────┐
        │ no                                             │
    ScoringBackend.score(block)  (durable tier + scorer) │
        │ ok: write session tier      │ error: fallback 1 (not cached)
        ▼                             ▼                  ▼
    element still attached? ──no──> dropped silently
        │ yes
    ScannedElementState + processed marker + renderer.on_scored(el, score)

Concurrent misses for the same content key may both reach the backend; the
result is identical, so the race is accepted.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Iterator
from typing import Protocol

from bs4 import Tag

from contentlens.config import FALLBACK_SCORE, PROCESSED_MARKER_ATTR
from contentlens.contracts.settings import ExtensionSettings
from contentlens.contracts.types import TextBlock
from contentlens.dom.document import PageDocument
from contentlens.dom.scanner import CandidateSelector
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter, log_event, time_block
from contentlens.scoring.scorer import CompositeScorer
from contentlens.storage.durable_cache import DurableScoreCache
from contentlens.storage.session_cache import SessionScoreCache

logger = get_logger(__name__)


class Renderer(Protocol):
    """Visual-modification collaborator. Owns every visual side effect."""

    def on_scored(self, element: Tag, score: int) -> None: ...

    def update_settings(self, settings: ExtensionSettings) -> None: ...

    def reset(self) -> None: ...


class NullRenderer:
    """Renderer that does nothing (CLI and headless runs)."""

    def on_scored(self, element: Tag, score: int) -> None:
        pass

    def update_settings(self, settings: ExtensionSettings) -> None:
        pass

    def reset(self) -> None:
        pass


class ScoringBackend(Protocol):
    async def score(self, block: TextBlock) -> int: ...


class LocalScoringBackend:
    """Durable-tier lookup, heuristic scoring on miss, durable-tier write."""

    def __init__(self, durable: DurableScoreCache, scorer: CompositeScorer | None = None):
        self.durable = durable
        self.scorer = scorer if scorer is not None else CompositeScorer()

    async def score(self, block: TextBlock) -> int:
        cached = await self.durable.get(block.content_key)
        if cached is not None:
            return cached
        score = self.scorer.score(block.normalized_text)
        await self.durable.set(block.content_key, score)
        return score


class ScannedElementState:
    """Transient element -> last applied score, for re-applying after settings change.

    Elements are held weakly and keyed by identity; nothing here is persisted.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[weakref.ReferenceType[Tag], int]] = {}

    def record(self, element: Tag, score: int) -> None:
        self._entries[id(element)] = (weakref.ref(element), score)

    def get(self, element: Tag) -> int | None:
        entry = self._entries.get(id(element))
        if entry is None or entry[0]() is not element:
            return None
        return entry[1]

    def items(self) -> Iterator[tuple[Tag, int]]:
        for key, (ref, score) in list(self._entries.items()):
            element = ref()
            if element is None:
                del self._entries[key]
                continue
            yield element, score

    def discard(self, element: Tag) -> None:
        self._entries.pop(id(element), None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class Orchestrator:
    def __init__(
        self,
        document: PageDocument,
        selector: CandidateSelector,
        session_cache: SessionScoreCache,
        backend: ScoringBackend,
        renderer: Renderer | None = None,
    ):
        self.document = document
        self.selector = selector
        self.session_cache = session_cache
        self.backend = backend
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.state = ScannedElementState()

    async def evaluate(self, block: TextBlock) -> int:
        """Score one block and hand the result to the renderer if still attached."""
        key = block.content_key
        score = self.session_cache.get(key)
        if score is not None:
            self._apply(block, score)
            return score

        try:
            score = await self.backend.score(block)
        except Exception as e:
            counter("score.fallback")
            logger.warning("Scoring failed for %s, using fallback: %s", key[:8], e)
            return FALLBACK_SCORE

        self.session_cache.set(key, score)
        self._apply(block, score)
        return score

    def _apply(self, block: TextBlock, score: int) -> None:
        element = block.element
        if element is None or not self.document.contains(element):
            counter("score.detached")
            return

        self.state.record(element, score)
        element[PROCESSED_MARKER_ATTR] = block.content_key
        self._render(element, score)

    def _render(self, element: Tag, score: int) -> None:
        try:
            self.renderer.on_scored(element, score)
        except Exception:
            counter("render.error")
            logger.exception("Renderer failed")

    async def process_element(self, element: Tag) -> int | None:
        """Incremental path: extract one element and evaluate it."""
        block = self.selector.extract_block(element, self.document)
        if block is None:
            return None
        return await self.evaluate(block)

    async def scan_and_evaluate(self, root: Tag | None = None) -> list[int]:
        """Full scan, then evaluate every block as one concurrent batch."""
        blocks = self.selector.scan(self.document, root)
        with time_block("orchestrator.batch.latency"):
            scores = await asyncio.gather(*(self.evaluate(b) for b in blocks))
        log_event("scan.complete", host=self.document.hostname, blocks=len(blocks))
        return list(scores)

    def reapply(self) -> int:
        """Re-run the renderer for every still-attached scanned element. No rescoring."""
        applied = 0
        for element, score in self.state.items():
            if not self.document.contains(element):
                self.state.discard(element)
                continue
            self._render(element, score)
            applied += 1
        return applied

    def reset(self) -> None:
        self.state.clear()
