"""Tests for the bounded work queue and its single drain loop."""

import asyncio

import pytest
from bs4 import BeautifulSoup

from contentlens.observability.telemetry import get_counter
from contentlens.runtime.work_queue import WorkQueue


def make_tags(n):
    soup = BeautifulSoup("".join(f"<p>item {i}</p>" for i in range(n)), "html.parser")
    return soup.find_all("p")


@pytest.mark.asyncio
async def test_drain_processes_everything_in_batches():
    handled = []

    async def handler(el):
        handled.append(el)

    queue = WorkQueue(handler, batch_size=2)
    tags = make_tags(5)
    assert queue.add_all(tags) == 5

    assert await queue.drain() == 5
    assert [id(el) for el in handled] == [id(el) for el in tags]
    assert len(queue) == 0
    assert get_counter("queue.batches") == 3


@pytest.mark.asyncio
async def test_same_element_queued_once():
    async def handler(el):
        pass

    queue = WorkQueue(handler)
    (tag,) = make_tags(1)
    queue.add(tag)
    queue.add(tag)
    assert len(queue) == 1


@pytest.mark.asyncio
async def test_identical_looking_elements_are_distinct():
    async def handler(el):
        pass

    soup = BeautifulSoup("<p>same</p><p>same</p>", "html.parser")
    queue = WorkQueue(handler)
    assert queue.add_all(soup.find_all("p")) == 2


@pytest.mark.asyncio
async def test_drain_is_never_reentrant():
    gate = asyncio.Event()
    handled = []
    active = 0
    peak = 0

    async def handler(el):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await gate.wait()
        handled.append(el)
        active -= 1

    queue = WorkQueue(handler, batch_size=1)
    first, second = make_tags(2)
    queue.add(first)

    running = asyncio.create_task(queue.drain())
    await asyncio.sleep(0)
    assert queue.draining

    queue.add(second)
    assert await queue.drain() == 0
    assert get_counter("queue.drain_skipped") == 1

    gate.set()
    assert await running == 2
    assert [id(el) for el in handled] == [id(first), id(second)]
    assert peak == 1
    assert not queue.draining


@pytest.mark.asyncio
async def test_full_queue_drops_new_items():
    async def handler(el):
        pass

    queue = WorkQueue(handler, max_pending=2)
    a, b, c = make_tags(3)

    assert queue.add(a)
    assert queue.add(b)
    assert not queue.add(c)
    assert len(queue) == 2
    assert get_counter("queue.dropped") == 1


@pytest.mark.asyncio
async def test_detached_elements_are_skipped():
    handled = []

    async def handler(el):
        handled.append(el)

    tags = make_tags(3)
    tags[1].extract()
    queue = WorkQueue(handler, is_live=lambda el: el.parent is not None)
    queue.add_all(tags)

    assert await queue.drain() == 2
    assert [id(el) for el in handled] == [id(tags[0]), id(tags[2])]


@pytest.mark.asyncio
async def test_handler_error_does_not_abort_batch():
    handled = []

    async def handler(el):
        if el.get_text() == "item 0":
            raise RuntimeError("render failed")
        handled.append(el)

    queue = WorkQueue(handler)
    queue.add_all(make_tags(3))

    assert await queue.drain() == 3
    assert len(handled) == 2
    assert get_counter("queue.handler_error") == 1
    assert not queue.draining


def test_invalid_configuration():
    async def handler(el):
        pass

    with pytest.raises(ValueError):
        WorkQueue(handler, batch_size=0)
    with pytest.raises(ValueError):
        WorkQueue(handler, max_pending=0)
