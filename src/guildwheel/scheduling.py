"""Host frame schedulers.

The spin controller never loops on its own: it asks the host for one frame
at a time and is called back with the current time in milliseconds. Each
frame is therefore a suspend point, and cancelling the pending handle stops
the animation dead.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol
import asyncio
import logging

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameHandle(Protocol):
    """A pending frame request."""

    def cancel(self) -> None:
        ...


class FrameScheduler(Protocol):
    """Clock plus one-shot frame requests, provided by the host."""

    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    def request_frame(self, callback: FrameCallback) -> FrameHandle:
        """Call `callback(now)` on the next display refresh."""
        ...


class AsyncioFrameScheduler:
    """Frame scheduler driven by the running asyncio loop.

    Frames fire every 1/fps seconds via loop.call_later, so other tasks
    (input handling, the authority request) run between frames.
    """

    def __init__(self, fps: int = 60, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.fps = fps
        self._interval = 1.0 / fps
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._get_loop().time() * 1000.0

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._get_loop()
        return loop.call_later(self._interval, lambda: callback(self.now()))


@dataclass
class _ManualHandle:
    callback: FrameCallback
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualFrameScheduler:
    """Deterministic scheduler with a fake clock.

    Used by tests and headless hosts: nothing happens until step() is called.
    """

    def __init__(self, frame_ms: float = 16.0, start_ms: float = 0.0) -> None:
        self.frame_ms = frame_ms
        self._now = start_ms
        self._pending: list[_ManualHandle] = []
        self.frames_run = 0

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> _ManualHandle:
        handle = _ManualHandle(callback)
        self._pending.append(handle)
        return handle

    @property
    def pending(self) -> int:
        """Number of live frame requests."""
        return sum(1 for h in self._pending if not h.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock without running any frames."""
        self._now += ms

    def step(self, ms: Optional[float] = None) -> int:
        """Advance the clock by one frame and run the frames due.

        Frames requested while stepping wait for the next step.

        Returns:
            Number of callbacks run
        """
        self._now += self.frame_ms if ms is None else ms
        due, self._pending = self._pending, []
        ran = 0
        for handle in due:
            if handle.cancelled:
                continue
            handle.callback(self._now)
            ran += 1
        self.frames_run += ran
        return ran

    def run_until_idle(self, max_frames: int = 100_000) -> int:
        """Step until no frames are pending.

        Returns:
            Number of steps taken
        """
        steps = 0
        while self.pending:
            if steps >= max_frames:
                raise RuntimeError(f"Frames still pending after {max_frames} steps")
            self.step()
            steps += 1
        return steps
