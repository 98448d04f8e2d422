"""
State machine for the spin lifecycle.

States:
    IDLE: No active session, the wheel is at rest
    REQUESTING: Waiting for the authority to pick a winner
    ANIMATING: Wheel spinning towards the winner's segment
    RESOLVED: Animation finished, result being delivered
    ABORTED: Spin failed or was cancelled, session being discarded
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Callable, Any, Optional
import logging

from guildwheel.core.errors import SpinErrorKind

logger = logging.getLogger(__name__)


class SpinState(Enum):
    """Spin lifecycle states."""
    IDLE = auto()
    REQUESTING = auto()
    ANIMATING = auto()
    RESOLVED = auto()
    ABORTED = auto()


@dataclass
class StateContext:
    """Context data for the current state."""
    session_id: Optional[int] = None
    error_kind: Optional[SpinErrorKind] = None
    result: Any = None


StateListener = Callable[[SpinState, SpinState, StateContext], None]


class SpinStateMachine:
    """
    Tracks the spin state and validates transitions.

    Only one spin can be in flight: every state but IDLE means busy, which
    is what guards against double submission.
    """

    # Valid state transitions
    VALID_TRANSITIONS: list[tuple[SpinState, SpinState]] = [
        # From IDLE
        (SpinState.IDLE, SpinState.REQUESTING),
        (SpinState.IDLE, SpinState.ABORTED),  # Nothing to spin for

        # From REQUESTING
        (SpinState.REQUESTING, SpinState.ANIMATING),
        (SpinState.REQUESTING, SpinState.ABORTED),

        # From ANIMATING
        (SpinState.ANIMATING, SpinState.RESOLVED),
        (SpinState.ANIMATING, SpinState.ABORTED),  # Cancel/teardown

        # Back to rest
        (SpinState.RESOLVED, SpinState.IDLE),
        (SpinState.ABORTED, SpinState.IDLE),
    ]

    def __init__(self) -> None:
        self._state = SpinState.IDLE
        self._context = StateContext()
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)

    @property
    def state(self) -> SpinState:
        """Get current state."""
        return self._state

    @property
    def context(self) -> StateContext:
        """Get current context."""
        return self._context

    @property
    def is_idle(self) -> bool:
        return self._state == SpinState.IDLE

    def can_transition(self, to_state: SpinState) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: SpinState, **context_updates: Any) -> bool:
        """
        Attempt to transition to a new state.

        Args:
            to_state: Target state
            **context_updates: Updates to apply to context

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state

        if to_state == SpinState.IDLE:
            self._context = StateContext()
        for key, value in context_updates.items():
            if hasattr(self._context, key):
                setattr(self._context, key, value)

        logger.info(f"Spin state: {old_state.name} -> {to_state.name}")

        for listener in list(self._listeners):
            try:
                listener(old_state, to_state, self._context)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def abort(self, kind: Optional[SpinErrorKind] = None) -> bool:
        """Enter ABORTED, then return to IDLE."""
        if not self.transition(SpinState.ABORTED, error_kind=kind):
            return False
        return self.transition(SpinState.IDLE)
