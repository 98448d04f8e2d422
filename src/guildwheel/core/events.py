"""
Event bus for the wheel.

The spin controller publishes its lifecycle here so displays, notifiers and
logs can follow a spin without holding a reference to the controller.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Awaitable, Optional
from enum import Enum, auto
from collections import defaultdict
import asyncio
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Events published by the spin controller."""
    # Spin lifecycle
    SPIN_REQUESTED = auto()
    SPIN_STARTED = auto()
    SPIN_TICK = auto()
    SPIN_RESOLVED = auto()
    SPIN_ABORTED = auto()

    # Candidate roster
    CANDIDATES_CHANGED = auto()
    CANDIDATES_DEFERRED = auto()


@dataclass
class Event:
    """
    A published event.

    Attributes:
        type: Event type
        data: Payload (session id, result, rotation, ...)
        source: Publishing component
        timestamp: Wall-clock creation time
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "wheel"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], Optional[Awaitable[None]]]


class EventBus:
    """
    Publish/subscribe hub with a bounded history.

    emit() runs plain handlers inline and is what the controller uses inside
    frame callbacks. emit_async() also awaits coroutine handlers.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """Register a handler for one event type; returns an unsubscribe function."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Register a handler for every event; returns an unsubscribe function."""
        self._catch_all.append(handler)

        def unsubscribe() -> None:
            if handler in self._catch_all:
                self._catch_all.remove(handler)

        return unsubscribe

    def _targets(self, event: Event) -> list[Handler]:
        return [*self._handlers.get(event.type, ()), *self._catch_all]

    def emit(self, event: Event) -> None:
        """Publish to plain handlers; coroutine handlers are skipped."""
        self._record(event)
        for handler in self._targets(event):
            if inspect.iscoroutinefunction(handler):
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in {event.type.name} handler: {e}")

    async def emit_async(self, event: Event) -> None:
        """Publish to every handler, awaiting coroutine handlers together."""
        self._record(event)
        pending = []
        for handler in self._targets(event):
            if inspect.iscoroutinefunction(handler):
                pending.append(asyncio.ensure_future(handler(event)))
                continue
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in {event.type.name} handler: {e}")

        for outcome in await asyncio.gather(*pending, return_exceptions=True):
            if isinstance(outcome, Exception):
                logger.error(f"Error in async {event.type.name} handler: {outcome}")

    def _record(self, event: Event) -> None:
        self._history.append(event)
        if len(self._history) > self._history_limit:
            del self._history[0]

    def get_history(self, event_type: Optional[EventType] = None, limit: int = 10) -> list[Event]:
        """Most recent events, optionally of one type."""
        history = self._history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


def spin_resolved_event(result: Any, session_id: int) -> Event:
    return Event(
        EventType.SPIN_RESOLVED,
        data={"result": result, "session_id": session_id},
        source="controller",
    )


def spin_aborted_event(kind: Any, message: str, session_id: Optional[int]) -> Event:
    return Event(
        EventType.SPIN_ABORTED,
        data={"kind": kind, "message": message, "session_id": session_id},
        source="controller",
    )


def tick_event(rotation: float, progress: float, session_id: int) -> Event:
    """Per-frame rotation update."""
    return Event(
        EventType.SPIN_TICK,
        data={"rotation": rotation, "progress": progress, "session_id": session_id},
        source="controller",
    )
