"""Selection animation controller.

Owns the spin lifecycle: asks the winner authority for an outcome, plans a
spin that lands on the winner's segment, drives it frame by frame through the
host scheduler, and reports the result.

Flow:
    1. spin(): snapshot the displayed candidates and layout into a session
    2. REQUESTING: await pick_winner() exactly once
    3. ANIMATING: one frame per display refresh, render(layout, rotation)
    4. RESOLVED: fire on_resolved(result) once, back to IDLE

The live candidate set is never read by an in-flight session. Updates that
arrive mid-spin are buffered and applied when the session ends.
"""

import asyncio
import itertools
import logging
import random
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, Optional

from guildwheel.animation.spin import SpinPlan, plan_spin
from guildwheel.authority.base import WinnerAuthority
from guildwheel.config.settings import WheelSettings
from guildwheel.core.errors import SpinError, SpinErrorKind
from guildwheel.core.events import (
    Event,
    EventBus,
    EventType,
    spin_aborted_event,
    spin_resolved_event,
    tick_event,
)
from guildwheel.core.state import SpinState, SpinStateMachine
from guildwheel.scheduling import FrameHandle, FrameScheduler
from guildwheel.wheel.geometry import SegmentLayout, layout
from guildwheel.wheel.models import Candidate, CandidateSet, SpinCriteria, SpinResult

logger = logging.getLogger(__name__)

RenderCallback = Callable[[SegmentLayout, float], None]
ResolvedCallback = Callable[[SpinResult], None]
AbortedCallback = Callable[[SpinErrorKind, str], None]


@dataclass
class SpinSession:
    """Ephemeral state of one spin.

    Attributes:
        id: Monotonic session number
        candidates: Candidate set frozen at spin start
        layout: Layout of the frozen set
        criteria: Criteria sent to the authority
        result: Authority's answer, once received
        plan: Trajectory, computed once when the result arrives
        started_at: Scheduler time (ms) when animating began
        frame: Pending frame request
    """

    id: int
    candidates: CandidateSet
    layout: SegmentLayout
    criteria: SpinCriteria
    result: Optional[SpinResult] = None
    plan: Optional[SpinPlan] = None
    started_at: float = 0.0
    frame: Optional[FrameHandle] = None


class SpinController:
    """Drives the wheel from spin request to resolved winner."""

    def __init__(
        self,
        authority: WinnerAuthority,
        scheduler: FrameScheduler,
        render: Optional[RenderCallback] = None,
        event_bus: Optional[EventBus] = None,
        settings: Optional[WheelSettings] = None,
        rng: Optional[random.Random] = None,
        candidates: Iterable[Candidate] = (),
    ) -> None:
        self._authority = authority
        self._scheduler = scheduler
        self._render = render
        self.event_bus = event_bus or EventBus()
        self.settings = settings or WheelSettings()
        self._rng = rng or random.Random()

        self._machine = SpinStateMachine()
        self._session_ids = itertools.count(1)
        self._session: Optional[SpinSession] = None
        self._closed = False

        self._candidates = CandidateSet(candidates)
        self._layout = self._make_layout(self._candidates)
        self._pending_candidates: Optional[CandidateSet] = None
        self._rotation = 0.0

        # Callbacks
        self._on_resolved: Optional[ResolvedCallback] = None
        self._on_aborted: Optional[AbortedCallback] = None

    # Read-only views
    @property
    def state(self) -> SpinState:
        return self._machine.state

    @property
    def state_machine(self) -> SpinStateMachine:
        return self._machine

    @property
    def candidates(self) -> CandidateSet:
        """Candidates currently on display."""
        return self._candidates

    @property
    def pending_candidates(self) -> Optional[CandidateSet]:
        """Update buffered until the current spin ends."""
        return self._pending_candidates

    @property
    def layout(self) -> SegmentLayout:
        return self._layout

    @property
    def rotation(self) -> float:
        return self._rotation

    @property
    def session(self) -> Optional[SpinSession]:
        return self._session

    @property
    def is_busy(self) -> bool:
        return not self._machine.is_idle

    @property
    def closed(self) -> bool:
        return self._closed

    def set_on_resolved(self, callback: Optional[ResolvedCallback]) -> None:
        """Set callback fired once per successful spin."""
        self._on_resolved = callback

    def set_on_aborted(self, callback: Optional[AbortedCallback]) -> None:
        """Set callback fired at most once per failed spin."""
        self._on_aborted = callback

    # Candidates
    def _make_layout(self, candidates: CandidateSet) -> SegmentLayout:
        return layout(
            candidates,
            zero_offset=self.settings.zero_offset,
            color_mode=self.settings.color_mode,
            label_radius=self.settings.label_radius,
        )

    def set_candidates(self, candidates: Iterable[Candidate]) -> bool:
        """Replace the displayed candidates.

        Returns:
            True if applied now, False if buffered until the spin ends
        """
        if self._closed:
            return False
        if not isinstance(candidates, CandidateSet):
            candidates = CandidateSet(candidates)

        if self.is_busy:
            self._pending_candidates = candidates
            logger.debug(f"Candidate update deferred until spin ends ({len(candidates)} candidates)")
            self.event_bus.emit(Event(
                EventType.CANDIDATES_DEFERRED,
                data={"count": len(candidates)},
                source="controller",
            ))
            return False

        self._apply_candidates(candidates)
        return True

    def _apply_candidates(self, candidates: CandidateSet) -> None:
        if candidates.same_as(self._candidates):
            return
        self._candidates = candidates
        self._layout = self._make_layout(candidates)
        logger.info(f"Wheel now shows {len(candidates)} candidates")
        self.event_bus.emit(Event(
            EventType.CANDIDATES_CHANGED,
            data={"count": len(candidates), "ids": candidates.ids},
            source="controller",
        ))
        self.render_current()

    def _apply_pending_candidates(self) -> None:
        pending, self._pending_candidates = self._pending_candidates, None
        if pending is not None and not self._closed:
            self._apply_candidates(pending)

    async def refresh_candidates(self, criteria: Optional[SpinCriteria] = None) -> CandidateSet:
        """Fetch eligible candidates from the authority and display them.

        Raises:
            SpinError: If the authority query fails
        """
        criteria = criteria or SpinCriteria()
        candidates = await self._authority.list_eligible_candidates(criteria)
        self.set_candidates(candidates)
        return candidates

    # Rendering
    def render_current(self) -> None:
        """Render the wheel at its current rotation."""
        self._draw(self._layout, self._rotation)

    def _draw(self, wheel: SegmentLayout, rotation: float) -> None:
        if self._render is None:
            return
        try:
            self._render(wheel, rotation)
        except Exception as e:
            logger.error(f"Error in render callback: {e}")

    # Spin lifecycle
    def _is_current(self, session: SpinSession) -> bool:
        return self._session is session and not self._closed

    async def spin(self, criteria: Optional[SpinCriteria] = None) -> bool:
        """Start a spin.

        A no-op while another spin is in flight or after teardown.

        Returns:
            True if the wheel started animating
        """
        if self._closed:
            logger.debug("Spin ignored: controller torn down")
            return False
        if not self._machine.is_idle:
            logger.debug(f"Spin ignored: already {self._machine.state.name}")
            return False

        criteria = criteria or SpinCriteria()
        candidates = self._candidates
        wheel = self._layout

        if wheel.is_empty:
            self._fail(None, SpinErrorKind.NO_ELIGIBLE_CANDIDATES, "empty candidate set")
            return False

        session = SpinSession(
            id=next(self._session_ids),
            candidates=candidates,
            layout=wheel,
            criteria=criteria,
        )
        self._session = session
        self._machine.transition(SpinState.REQUESTING, session_id=session.id)
        self.event_bus.emit(Event(
            EventType.SPIN_REQUESTED,
            data={"session_id": session.id, "criteria": criteria},
            source="controller",
        ))
        if not self._is_current(session):
            return False

        try:
            result = await self._authority.pick_winner(criteria)
        except asyncio.CancelledError:
            if self._is_current(session):
                self.cancel()
            raise
        except SpinError as e:
            if not self._is_current(session):
                self._drop_stale(session)
                return False
            self._fail(session, e.kind, e.detail or str(e))
            return False
        except Exception as e:
            if not self._is_current(session):
                self._drop_stale(session)
                return False
            logger.exception(f"Unexpected error from winner authority: {e}")
            self._fail(session, SpinErrorKind.AUTHORITY_UNREACHABLE, str(e))
            return False

        if not self._is_current(session):
            self._drop_stale(session)
            return False

        index = candidates.index_of(result.winner_id)
        if index is None:
            self._fail(
                session,
                SpinErrorKind.AUTHORITY_REJECTED,
                f"winner {result.winner_id!r} is not on the wheel",
            )
            return False

        session.result = result
        session.plan = plan_spin(
            wheel,
            index,
            start_rotation=self._rotation,
            rng=self._rng,
            duration_ms=self.settings.duration_ms,
            min_turns=self.settings.min_turns,
            max_turns=self.settings.max_turns,
            epsilon=self.settings.boundary_epsilon,
            pointer_angle=self.settings.pointer_angle,
            easing=self.settings.easing,
        )
        session.started_at = self._scheduler.now()
        self._rotation = session.plan.start_rotation

        self._machine.transition(SpinState.ANIMATING)
        self.event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={"session_id": session.id, "duration_ms": session.plan.duration_ms},
            source="controller",
        ))
        if self._is_current(session):
            self._draw(wheel, self._rotation)
        if not self._is_current(session):
            # A listener or the render callback ended the spin
            return False
        session.frame = self._scheduler.request_frame(partial(self._on_frame, session))
        return True

    def _on_frame(self, session: SpinSession, now: float) -> None:
        """Advance the animation by one frame."""
        if not self._is_current(session) or self._machine.state != SpinState.ANIMATING:
            return

        session.frame = None
        elapsed = now - session.started_at
        rotation, done = session.plan.advance(elapsed)
        self._rotation = rotation
        self._draw(session.layout, rotation)
        if not self._is_current(session):
            return
        self.event_bus.emit(tick_event(rotation, session.plan.progress(elapsed), session.id))
        # Callbacks may have cancelled or torn down the spin
        if not self._is_current(session):
            return

        if done:
            self._resolve(session)
        else:
            session.frame = self._scheduler.request_frame(partial(self._on_frame, session))

    def _resolve(self, session: SpinSession) -> None:
        result = session.result
        if not self._machine.transition(SpinState.RESOLVED, result=result):
            self._discard(session)
            return
        self._session = None
        logger.info(f"Spin {session.id} resolved: {result.winner_id}")

        if self._on_resolved:
            try:
                self._on_resolved(result)
            except Exception as e:
                logger.error(f"Error in resolved callback: {e}")
        self.event_bus.emit(spin_resolved_event(result, session.id))

        self._machine.transition(SpinState.IDLE)
        self._apply_pending_candidates()

    def _fail(self, session: Optional[SpinSession], kind: SpinErrorKind, detail: str) -> None:
        """Abort with a user-visible error and return to IDLE."""
        if session is not None:
            self._discard(session)
        session_id = session.id if session else None
        logger.warning(f"Spin aborted: {kind.name} ({detail})")

        self._machine.transition(SpinState.ABORTED, error_kind=kind)
        if kind.user_visible:
            if self._on_aborted:
                try:
                    self._on_aborted(kind, kind.message)
                except Exception as e:
                    logger.error(f"Error in aborted callback: {e}")
            self.event_bus.emit(spin_aborted_event(kind, kind.message, session_id))

        self._machine.transition(SpinState.IDLE)
        self._apply_pending_candidates()

    def _discard(self, session: SpinSession) -> None:
        if session.frame is not None:
            session.frame.cancel()
            session.frame = None
        if self._session is session:
            self._session = None

    def _drop_stale(self, session: SpinSession) -> None:
        logger.debug(
            f"Discarding authority response for spin {session.id}: "
            f"{SpinErrorKind.SESSION_SUPERSEDED.name}"
        )

    def cancel(self) -> bool:
        """Stop the in-flight spin without notifying anyone.

        The wheel stays where it is; a late authority response is dropped.

        Returns:
            True if a spin was cancelled
        """
        session = self._session
        if session is None:
            return False

        self._discard(session)
        logger.info(f"Spin {session.id} cancelled in {self._machine.state.name}")
        self._machine.abort(SpinErrorKind.SESSION_SUPERSEDED)
        self._apply_pending_candidates()
        return True

    def teardown(self) -> None:
        """Detach from the host view.

        Stops scheduling frames; later spins and authority responses are
        ignored.
        """
        if self._closed:
            return
        self._closed = True
        self._pending_candidates = None
        self.cancel()
        logger.info("SpinController torn down")
