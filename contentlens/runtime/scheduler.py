"""
Timer primitives for the mutation monitor.

Both run on the current asyncio loop; nothing here creates threads. Callback
exceptions are logged and swallowed so a failing handler never stops page
monitoring.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Generic, TypeVar

from contentlens.observability.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class Debouncer(Generic[T]):
    """
    Trailing-edge coalescing.

    Items pushed while the timer is pending are accumulated; every push
    restarts the timer. When it fires, the callback receives all accumulated
    items from every burst in one list.
    """

    def __init__(self, delay: float, callback: Callable[[list[T]], Awaitable[None]]):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self._callback = callback
        self._pending: list[T] = []
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def scheduled(self) -> bool:
        return self._timer is not None

    def push(self, items: Iterable[T]) -> None:
        """Queue items and (re)start the timer. Must be called on the loop."""
        self._pending.extend(items)
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        batch, self._pending = self._pending, []
        if not batch:
            return
        task = asyncio.ensure_future(self._run(batch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, batch: list[T]) -> None:
        try:
            await self._callback(batch)
        except Exception:
            logger.exception("Debounced callback failed (%d items)", len(batch))

    async def flush(self) -> None:
        """Run the callback now with whatever is pending."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        batch, self._pending = self._pending, []
        if batch:
            await self._run(batch)

    def cancel(self) -> None:
        """Drop pending items without running the callback."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = []

    async def wait_idle(self) -> None:
        """Wait for callbacks already fired to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks))


class PeriodicTask:
    """Run an async callback every `interval` seconds until stopped."""

    def __init__(self, interval: float, callback: Callable[[], Awaitable[object]], name: str = "periodic"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.name = name
        self._callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._callback()
            except Exception:
                logger.exception("Periodic task %s failed", self.name)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
