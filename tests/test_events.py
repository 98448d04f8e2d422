from __future__ import annotations

import pytest

from guildwheel.core.events import (
    Event,
    EventBus,
    EventType,
    spin_aborted_event,
    tick_event,
)
from guildwheel.core.errors import SpinErrorKind


def test_subscribe_and_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(EventType.SPIN_STARTED, received.append)

    bus.emit(Event(EventType.SPIN_STARTED, data={"session_id": 1}))
    bus.emit(Event(EventType.SPIN_RESOLVED))
    unsubscribe()
    bus.emit(Event(EventType.SPIN_STARTED))

    assert [e.data for e in received] == [{"session_id": 1}]


def test_subscribe_all_and_handler_errors():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.SPIN_TICK, broken)
    bus.subscribe_all(received.append)
    bus.emit(tick_event(1.0, 0.5, 2))

    assert received[0].type == EventType.SPIN_TICK
    assert received[0].data["progress"] == 0.5


def test_history_limit_and_filter():
    bus = EventBus(history_limit=3)
    for i in range(5):
        bus.emit(tick_event(float(i), 0.0, 1))
    bus.emit(spin_aborted_event(SpinErrorKind.AUTHORITY_REJECTED, "nope", 1))

    history = bus.get_history(limit=10)
    assert len(history) == 3
    assert history[-1].type == EventType.SPIN_ABORTED
    assert [e.data["rotation"] for e in bus.get_history(EventType.SPIN_TICK)] == [3.0, 4.0]

    bus.clear_history()
    assert bus.get_history() == []


@pytest.mark.asyncio
async def test_async_handlers():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event.type)

    bus.subscribe(EventType.CANDIDATES_CHANGED, handler)

    # emit() skips coroutine handlers
    bus.emit(Event(EventType.CANDIDATES_CHANGED))
    assert received == []

    await bus.emit_async(Event(EventType.CANDIDATES_CHANGED))
    assert received == [EventType.CANDIDATES_CHANGED]
    assert len(bus.get_history(EventType.CANDIDATES_CHANGED)) == 2


@pytest.mark.asyncio
async def test_async_handler_errors_are_contained():
    bus = EventBus()
    received = []

    async def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.SPIN_RESOLVED, broken)
    bus.subscribe_all(received.append)
    await bus.emit_async(Event(EventType.SPIN_RESOLVED))

    assert len(received) == 1
