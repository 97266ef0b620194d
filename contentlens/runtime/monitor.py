"""
Mutation Monitor: feed changed parts of a live document back into the pipeline.

- Mutation records are coalesced by a Debouncer and handled as one batch.
- On sweep hosts (virtualized feeds that recycle nodes) records are not
  interpreted; a periodic sweep re-checks the known content selectors for
  elements whose processed marker is missing or stale.
- Elsewhere, added nodes are walked through CandidateSelector.collect_candidates.
- Client-side navigation is detected by polling the URL; after a settle
  delay the owner's reset-and-rescan callback runs.

Every path ends in WorkQueue.drain(), which never overlaps with itself.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from bs4 import Tag

from contentlens.config import (
    MUTATION_DEBOUNCE_SECONDS,
    NAV_POLL_INTERVAL_SECONDS,
    NAV_SETTLE_SECONDS,
    SWEEP_INTERVAL_SECONDS,
)
from contentlens.dom.document import MutationRecord, PageDocument
from contentlens.dom.scanner import CandidateSelector
from contentlens.dom.selector_data import SWEEP_HOSTS
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter, log_event
from contentlens.runtime.scheduler import Debouncer, PeriodicTask
from contentlens.runtime.work_queue import WorkQueue

logger = get_logger(__name__)


class MutationMonitor:
    def __init__(
        self,
        document: PageDocument,
        selector: CandidateSelector,
        queue: WorkQueue,
        on_navigate: Callable[[], Awaitable[None]],
        debounce_seconds: float = MUTATION_DEBOUNCE_SECONDS,
        sweep_interval: float = SWEEP_INTERVAL_SECONDS,
        nav_poll_interval: float = NAV_POLL_INTERVAL_SECONDS,
        nav_settle_seconds: float = NAV_SETTLE_SECONDS,
        sweep_hosts: Iterable[str] = SWEEP_HOSTS,
    ):
        self.document = document
        self.selector = selector
        self.queue = queue
        self.nav_settle_seconds = nav_settle_seconds
        self.sweep_hosts = frozenset(sweep_hosts)
        self._on_navigate = on_navigate
        self._debouncer: Debouncer[MutationRecord] = Debouncer(debounce_seconds, self.handle_records)
        self._sweeper = PeriodicTask(sweep_interval, self.sweep, name="contentlens-sweep")
        self._nav_poller = PeriodicTask(nav_poll_interval, self.check_navigation, name="contentlens-nav")
        self._last_url = document.url
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def debouncer(self) -> Debouncer[MutationRecord]:
        return self._debouncer

    @property
    def uses_sweep(self) -> bool:
        return self.document.hostname in self.sweep_hosts

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._last_url = self.document.url
        self.document.observe(self._on_mutations)
        if self.uses_sweep:
            self._sweeper.start()
        self._nav_poller.start()
        logger.debug(
            "Monitor started on %s (%s)",
            self.document.hostname or "<no host>",
            "sweep" if self.uses_sweep else "mutations",
        )

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self.document.disconnect(self._on_mutations)
        self._debouncer.cancel()
        self._sweeper.stop()
        self._nav_poller.stop()
        logger.debug("Monitor stopped")

    def _on_mutations(self, records: list[MutationRecord]) -> None:
        self._debouncer.push(records)

    async def handle_records(self, records: list[MutationRecord]) -> int:
        """Turn one coalesced batch of records into queued work and drain it.

        Returns the number of elements queued.
        """
        if self.uses_sweep:
            # Recycled nodes make individual records meaningless here
            return await self.sweep()

        allow_generic = self.document.hostname not in self.selector.pass1_only_hosts
        queued = 0
        for root in self._changed_roots(records):
            if not self.document.contains(root):
                continue
            queued += self.queue.add_all(self.selector.collect_candidates(root, allow_generic))

        counter("monitor.records", len(records))
        if queued:
            await self.queue.drain()
        return queued

    @staticmethod
    def _changed_roots(records: list[MutationRecord]) -> list[Tag]:
        roots: list[Tag] = []
        seen: set[int] = set()

        def add(el: Tag) -> None:
            if id(el) not in seen:
                seen.add(id(el))
                roots.append(el)

        for record in records:
            for el in record.added_elements():
                add(el)
            # Text changed in place, or bare text nodes were added
            if record.kind == "characterData" or len(record.added_elements()) < len(record.added_nodes):
                add(record.target)
        return roots

    async def sweep(self) -> int:
        """Queue targeted elements with a missing or stale processed marker."""
        stale = self.selector.sweep(self.document)
        queued = self.queue.add_all(stale)
        if queued:
            counter("monitor.sweep_found", queued)
            await self.queue.drain()
        return queued

    async def check_navigation(self) -> bool:
        """Detect a URL change; after the settle delay, reset and rescan."""
        url = self.document.url
        if url == self._last_url:
            return False

        self._last_url = url
        counter("monitor.navigation")
        log_event("navigation", host=self.document.hostname)
        self._debouncer.cancel()
        self.queue.clear()
        await asyncio.sleep(self.nav_settle_seconds)
        await self._on_navigate()
        return True
