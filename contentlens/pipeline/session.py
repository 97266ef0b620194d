"""
Per-page session: wires the core together and follows the settings lifecycle.

One ContentSession per loaded page. It owns the selector, session cache,
orchestrator, work queue and monitor; the durable cache and settings store are
injected so they can be shared across pages.
"""

from __future__ import annotations

import asyncio
from typing import Any

from contentlens.config import SPA_INITIAL_SCAN_DELAY_SECONDS
from contentlens.contracts.settings import DEFAULT_SETTINGS, ExtensionSettings
from contentlens.dom.document import PageDocument
from contentlens.dom.scanner import CandidateSelector
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import log_event
from contentlens.pipeline.orchestrator import (
    LocalScoringBackend,
    Orchestrator,
    Renderer,
    ScoringBackend,
)
from contentlens.runtime.monitor import MutationMonitor
from contentlens.runtime.work_queue import WorkQueue
from contentlens.storage.durable_cache import DurableScoreCache
from contentlens.storage.session_cache import SessionScoreCache
from contentlens.storage.settings_store import SettingsStore

logger = get_logger(__name__)


class ContentSession:
    def __init__(
        self,
        document: PageDocument,
        settings_store: SettingsStore,
        durable_cache: DurableScoreCache,
        renderer: Renderer | None = None,
        session_cache: SessionScoreCache | None = None,
        backend: ScoringBackend | None = None,
        selector: CandidateSelector | None = None,
        spa_initial_delay: float = SPA_INITIAL_SCAN_DELAY_SECONDS,
        monitor_options: dict[str, Any] | None = None,
    ):
        """
        Args:
            document: The live page
            settings_store: Source of ExtensionSettings
            durable_cache: Persisted score cache shared across pages
            renderer: Visual collaborator (defaults to a no-op)
            session_cache: Per-page tier (a fresh one by default)
            backend: Scoring host (defaults to LocalScoringBackend)
            selector: Candidate selector (defaults to the built-in site tables)
            spa_initial_delay: Wait before the first scan on Pass-1-only hosts
            monitor_options: Extra MutationMonitor keyword arguments (intervals)
        """
        self.document = document
        self.settings_store = settings_store
        self.durable_cache = durable_cache
        self.settings: ExtensionSettings = DEFAULT_SETTINGS
        self.spa_initial_delay = spa_initial_delay

        self.selector = selector if selector is not None else CandidateSelector()
        self.session_cache = session_cache if session_cache is not None else SessionScoreCache()
        self.orchestrator = Orchestrator(
            document,
            self.selector,
            self.session_cache,
            backend if backend is not None else LocalScoringBackend(durable_cache),
            renderer,
        )
        self.queue = WorkQueue(self.orchestrator.process_element, is_live=document.contains)
        self.monitor = MutationMonitor(
            document,
            self.selector,
            self.queue,
            on_navigate=self._on_navigate,
            **(monitor_options or {}),
        )
        self.active = False

    @property
    def renderer(self) -> Renderer:
        return self.orchestrator.renderer

    def _blocked_reason(self, settings: ExtensionSettings) -> str | None:
        if not settings.enabled:
            return "disabled"
        if settings.is_host_disabled(self.document.hostname):
            return "domain_disabled"
        return None

    def _push_settings(self, settings: ExtensionSettings) -> None:
        self.settings = settings
        self.selector.set_min_text_length(settings.min_text_length)
        self.renderer.update_settings(settings)

    async def start(self) -> bool:
        """Load settings, run the initial scan and start monitoring.

        Returns False when the extension or this host is disabled.
        """
        self._push_settings(await self.settings_store.load())
        reason = self._blocked_reason(self.settings)
        if reason is not None:
            log_event("session.skipped", host=self.document.hostname, reason=reason)
            return False

        await self.durable_cache.load()
        if self.document.hostname in self.selector.pass1_only_hosts and self.spa_initial_delay > 0:
            # SPA feeds render after load; give them time before the first scan
            await asyncio.sleep(self.spa_initial_delay)

        await self.orchestrator.scan_and_evaluate()
        self.monitor.start()
        self.active = True
        log_event("session.started", host=self.document.hostname)
        return True

    def stop(self) -> None:
        self.monitor.stop()
        self.queue.clear()
        self.active = False

    async def apply_settings(self, settings: ExtensionSettings) -> None:
        """React to a settings push from the settings collaborator."""
        previous = self.settings
        self._push_settings(settings)

        if self._blocked_reason(settings) is not None:
            self.stop()
            self.orchestrator.reset()
            self.renderer.reset()
            return

        if not self.active:
            await self._reset_and_rescan(reset_renderer=True)
            self.monitor.start()
            self.active = True
            return

        if settings.min_text_length != previous.min_text_length:
            await self.orchestrator.scan_and_evaluate()
        elif settings.threshold != previous.threshold or settings.mode != previous.mode:
            self.orchestrator.reapply()

    async def update_settings(self, updates: dict[str, Any]) -> ExtensionSettings:
        """Persist a partial settings change and apply it to this page."""
        settings = await self.settings_store.update(updates)
        await self.apply_settings(settings)
        return settings

    async def re_evaluate(self) -> None:
        """Forget everything applied on this page and rescan from scratch."""
        await self._reset_and_rescan(reset_renderer=True)

    async def _on_navigate(self) -> None:
        await self._reset_and_rescan(reset_renderer=False)

    async def _reset_and_rescan(self, reset_renderer: bool) -> None:
        self.orchestrator.reset()
        self.queue.clear()
        if reset_renderer:
            self.renderer.reset()
        await self.orchestrator.scan_and_evaluate()

    async def clear_cache(self) -> None:
        """Drop both cache tiers (user action)."""
        self.session_cache.clear()
        await self.durable_cache.clear()

    async def get_cache_size(self) -> int:
        """Persisted score count, also on pages where the session never started."""
        return await self.durable_cache.count()
