"""
In-process counters, timings and structured events.

Nothing leaves the process. Counters and timing samples live in module-level
dicts that tests read back (and clear with reset_telemetry). Events are
log lines on the "contentlens.telemetry" logger.

Never pass page text as an event field; content keys and counts only.
"""

from __future__ import annotations

import contextlib
import logging
import time
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger("contentlens.telemetry")

_COUNTERS: dict[str, int] = {}
_TIMINGS: dict[str, list[float]] = {}


def log_event(event_name: str, **fields: Any) -> None:
    """
    Emit one structured event at info level.

    Side Effects:
        - Writes to logger (info level)
    """
    logger.info("event=%s %s", event_name, fields)


def counter(name: str, increment: int = 1) -> int:
    """
    Add `increment` to a named counter and return the new total.

    Side Effects:
        - Modifies _COUNTERS (in-memory state)
    """
    total = _COUNTERS[name] = _COUNTERS.get(name, 0) + increment
    logger.debug("counter=%s value=%s", name, total)
    return total


def get_counter(name: str) -> int:
    return _COUNTERS.get(name, 0)


@contextlib.contextmanager
def time_block(metric_name: str) -> Iterator[None]:
    """
    Record the wall time of the block in seconds, also when it raises.

    Side Effects:
        - Appends to _TIMINGS (in-memory state)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        _TIMINGS.setdefault(metric_name, []).append(time.perf_counter() - start)


def get_timings(metric_name: str) -> list[float]:
    """Samples recorded for a metric, oldest first (a copy)."""
    return list(_TIMINGS.get(metric_name, ()))


def reset_telemetry() -> None:
    """
    Forget all counters and timings.

    Side Effects:
        - Clears _COUNTERS and _TIMINGS
    """
    _COUNTERS.clear()
    _TIMINGS.clear()
