from __future__ import annotations

import asyncio
import random
from typing import Optional

import pytest

from guildwheel.config.settings import WheelSettings
from guildwheel.controller import SpinController
from guildwheel.core.events import EventBus
from guildwheel.scheduling import ManualFrameScheduler
from guildwheel.wheel.models import CandidateSet, SpinCriteria, SpinResult


class FakeAuthority:
    """Scripted winner authority that counts its calls.

    Set `gate` to an asyncio.Event to hold pick_winner() until it is set.
    """

    def __init__(
        self,
        candidates: Optional[CandidateSet] = None,
        winner_id: Optional[str] = None,
        error: Optional[BaseException] = None,
    ):
        self.candidates = candidates or CandidateSet()
        self.winner_id = winner_id
        self.error = error
        self.gate: Optional[asyncio.Event] = None
        self.pick_calls = 0
        self.list_calls = 0
        self.criteria: list[SpinCriteria] = []

    async def list_eligible_candidates(self, criteria: SpinCriteria) -> CandidateSet:
        self.list_calls += 1
        return self.candidates

    async def pick_winner(self, criteria: SpinCriteria) -> SpinResult:
        self.pick_calls += 1
        self.criteria.append(criteria)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return SpinResult(
            winner_id=self.winner_id,
            winner=self.candidates.get(self.winner_id),
            payload={"source": "fake"},
        )


class Recorder:
    """Collects controller callbacks."""

    def __init__(self):
        self.renders: list[tuple] = []
        self.resolved: list[SpinResult] = []
        self.aborted: list[tuple] = []
        # Optional side effect run on every render, e.g. tearing the controller down
        self.render_hook = None

    def render(self, wheel, rotation):
        self.renders.append((wheel, rotation))
        if self.render_hook is not None:
            self.render_hook(wheel, rotation)

    def on_resolved(self, result):
        self.resolved.append(result)

    def on_aborted(self, kind, message):
        self.aborted.append((kind, message))


@pytest.fixture
def abcd():
    return CandidateSet.from_labels("A", "B", "C", "D")


@pytest.fixture
def scheduler():
    return ManualFrameScheduler(frame_ms=16.0)


@pytest.fixture
def wheel_settings():
    return WheelSettings(duration_ms=1000.0)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_controller(scheduler, wheel_settings, recorder):
    def factory(authority, candidates=(), settings=None, seed=7):
        controller = SpinController(
            authority=authority,
            scheduler=scheduler,
            render=recorder.render,
            event_bus=EventBus(history_limit=1000),
            settings=settings or wheel_settings,
            rng=random.Random(seed),
            candidates=candidates,
        )
        controller.set_on_resolved(recorder.on_resolved)
        controller.set_on_aborted(recorder.on_aborted)
        return controller

    return factory


@pytest.fixture
def authority(abcd):
    return FakeAuthority(candidates=abcd, winner_id="C")
