"""
Bounded pending-element set with a single drain loop.

Elements are keyed by identity (bs4 tags compare structurally). One drain runs
at a time: a drain requested while another is in flight returns immediately,
and the running drain picks up anything added meanwhile before it exits.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from bs4 import Tag

from contentlens.config import QUEUE_BATCH_SIZE, QUEUE_MAX_PENDING
from contentlens.observability.logging import get_logger
from contentlens.observability.telemetry import counter, time_block

logger = get_logger(__name__)

ElementHandler = Callable[[Tag], Awaitable[object]]


class WorkQueue:
    def __init__(
        self,
        handler: ElementHandler,
        is_live: Callable[[Tag], bool] = lambda el: True,
        batch_size: int = QUEUE_BATCH_SIZE,
        max_pending: int = QUEUE_MAX_PENDING,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_pending <= 0:
            raise ValueError("max_pending must be positive")
        self._handler = handler
        self._is_live = is_live
        self.batch_size = batch_size
        self.max_pending = max_pending
        self._pending: dict[int, Tag] = {}
        self._draining = False

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def draining(self) -> bool:
        return self._draining

    def add(self, el: Tag) -> bool:
        """Queue an element. False if the queue is full and it was dropped."""
        key = id(el)
        if key in self._pending:
            return True
        if len(self._pending) >= self.max_pending:
            counter("queue.dropped")
            return False
        self._pending[key] = el
        return True

    def add_all(self, elements: Iterable[Tag]) -> int:
        return sum(1 for el in elements if self.add(el))

    def clear(self) -> None:
        self._pending.clear()

    def _take_batch(self) -> list[Tag]:
        keys = list(self._pending)[: self.batch_size]
        return [self._pending.pop(k) for k in keys]

    async def drain(self) -> int:
        """
        Process pending elements in batches until none are left.

        Returns the number of elements handed to the handler (0 if another
        drain was already running). Detached elements are skipped.
        """
        if self._draining:
            counter("queue.drain_skipped")
            return 0

        self._draining = True
        processed = 0
        try:
            while self._pending:
                batch = [el for el in self._take_batch() if self._is_live(el)]
                if not batch:
                    continue
                with time_block("queue.drain.latency"):
                    results = await asyncio.gather(
                        *(self._handler(el) for el in batch), return_exceptions=True
                    )
                for result in results:
                    if isinstance(result, Exception):
                        counter("queue.handler_error")
                        logger.warning("Queue handler failed: %s", result)
                processed += len(batch)
                counter("queue.batches")
        finally:
            self._draining = False
        return processed
