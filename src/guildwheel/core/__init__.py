"""Core framework components for the wheel."""

from .state import SpinState, SpinStateMachine
from .events import EventBus, Event, EventType
from .errors import SpinError, SpinErrorKind

__all__ = [
    "SpinState",
    "SpinStateMachine",
    "EventBus",
    "Event",
    "EventType",
    "SpinError",
    "SpinErrorKind",
]
