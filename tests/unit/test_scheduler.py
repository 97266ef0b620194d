"""Tests for the Debouncer and PeriodicTask timer primitives."""

import asyncio

import pytest

from contentlens.runtime.scheduler import Debouncer, PeriodicTask


@pytest.mark.asyncio
async def test_debouncer_coalesces_every_burst_into_one_call():
    batches = []

    async def handle(items):
        batches.append(items)

    debouncer = Debouncer(0.03, handle)
    debouncer.push([1])
    await asyncio.sleep(0.01)
    debouncer.push([2, 3])
    debouncer.push([4])
    assert debouncer.pending_count == 4

    await asyncio.sleep(0.1)
    await debouncer.wait_idle()

    assert batches == [[1, 2, 3, 4]]
    assert not debouncer.scheduled


@pytest.mark.asyncio
async def test_debouncer_separate_windows_make_separate_calls():
    batches = []

    async def handle(items):
        batches.append(items)

    debouncer = Debouncer(0.01, handle)
    debouncer.push(["a"])
    await asyncio.sleep(0.05)
    debouncer.push(["b"])
    await asyncio.sleep(0.05)
    await debouncer.wait_idle()

    assert batches == [["a"], ["b"]]


@pytest.mark.asyncio
async def test_debouncer_flush_and_cancel():
    batches = []

    async def handle(items):
        batches.append(items)

    debouncer = Debouncer(10.0, handle)
    debouncer.push([1])
    await debouncer.flush()
    assert batches == [[1]]

    debouncer.push([2])
    debouncer.cancel()
    await debouncer.flush()
    assert batches == [[1]]
    assert debouncer.pending_count == 0


@pytest.mark.asyncio
async def test_debouncer_callback_errors_are_contained():
    async def handle(items):
        raise RuntimeError("boom")

    debouncer = Debouncer(0.0, handle)
    debouncer.push([1])
    await asyncio.sleep(0.01)
    await debouncer.wait_idle()


def test_debouncer_rejects_negative_delay():
    async def handle(items):
        pass

    with pytest.raises(ValueError):
        Debouncer(-1, handle)


@pytest.mark.asyncio
async def test_periodic_task_keeps_running_after_errors():
    calls = []

    async def tick():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")

    task = PeriodicTask(0.01, tick)
    task.start()
    task.start()
    await asyncio.sleep(0.08)
    task.stop()
    count = len(calls)
    await asyncio.sleep(0.03)

    assert count >= 2
    assert len(calls) == count
    assert not task.running
