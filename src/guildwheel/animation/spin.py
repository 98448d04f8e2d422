"""Spin planning and the per-tick rotation function.

A spin is planned once, from already-known data: the winner's segment in
the frozen layout. Rendering only ever asks the plan for the rotation at a
given elapsed time, so the animation can't drift away from the outcome.
"""

from dataclasses import dataclass
import logging
import random

from guildwheel.animation.easing import Easing, interpolate
from guildwheel.wheel.geometry import (
    TWO_PI,
    SegmentLayout,
    angle_to_index,
    normalize_angle,
    segment_range,
)

logger = logging.getLogger(__name__)

# Attempts before falling back to the segment midpoint
MAX_TARGET_ATTEMPTS = 64


@dataclass(frozen=True)
class SpinPlan:
    """Precomputed trajectory of one spin.

    Attributes:
        target_index: Segment the wheel comes to rest on
        target_angle: Wheel-frame angle inside that segment
        turns: Full rotations before settling
        start_rotation: Rotation when the spin starts, in [0, 2pi)
        final_rotation: Rotation at progress 1
        duration_ms: Animation length in milliseconds
        easing: Decelerating curve applied to linear progress
    """

    target_index: int
    target_angle: float
    turns: int
    start_rotation: float
    final_rotation: float
    duration_ms: float
    easing: Easing | str = Easing.EASE_OUT_CUBIC

    def __post_init__(self) -> None:
        if self.duration_ms <= 0:
            raise ValueError(f"Spin duration must be positive, got {self.duration_ms}")
        if self.final_rotation <= self.start_rotation:
            raise ValueError("Final rotation must lie ahead of the start rotation")

    def progress(self, elapsed_ms: float) -> float:
        """Linear progress clamped to [0, 1]."""
        return max(0.0, min(1.0, elapsed_ms / self.duration_ms))

    def advance(self, elapsed_ms: float) -> tuple[float, bool]:
        """Rotation at a point in time.

        Args:
            elapsed_ms: Wall-clock time since the spin started

        Returns:
            (rotation, done). Once done, rotation is exactly final_rotation.
        """
        t = self.progress(elapsed_ms)
        rotation = interpolate(self.start_rotation, self.final_rotation, t, self.easing)
        return rotation, t >= 1.0


def choose_target_angle(
    wheel: SegmentLayout,
    index: int,
    rng: random.Random,
    epsilon: float,
) -> float:
    """Pick a uniformly random angle strictly inside a segment.

    Angles within epsilon of either boundary are rejected (epsilon is capped
    at a quarter of the segment width for very crowded wheels).

    Args:
        wheel: Layout the spin runs on
        index: Winning segment
        rng: Random source
        epsilon: Minimum distance from either boundary, in radians

    Returns:
        Wheel-frame angle for which angle_to_index() returns index
    """
    if epsilon <= 0:
        raise ValueError("Boundary epsilon must be positive")

    start, end = segment_range(wheel, index)
    margin = min(epsilon, (end - start) / 4)

    for _ in range(MAX_TARGET_ATTEMPTS):
        angle = rng.uniform(start, end)
        if angle - start < margin or end - angle < margin:
            continue
        if angle_to_index(wheel, angle) == index:
            return angle

    logger.warning(f"Falling back to midpoint of segment {index}")
    return (start + end) / 2


def plan_spin(
    wheel: SegmentLayout,
    index: int,
    start_rotation: float,
    rng: random.Random,
    duration_ms: float = 3000.0,
    min_turns: int = 4,
    max_turns: int = 4,
    epsilon: float = 0.02,
    pointer_angle: float = 0.0,
    easing: Easing | str = Easing.EASE_OUT_CUBIC,
) -> SpinPlan:
    """Plan a spin that comes to rest with segment `index` under the pointer.

    The final rotation is `turns * 2pi + target_angle - pointer_angle`; with
    the pointer at angle 0 that is k full turns plus the target angle.

    Raises:
        ValueError: On an empty layout or invalid turn counts
    """
    if wheel.is_empty:
        raise ValueError("Cannot plan a spin on an empty wheel")
    if min_turns < 2 or max_turns < min_turns:
        raise ValueError(f"Invalid turn range: {min_turns}..{max_turns}")

    target_angle = choose_target_angle(wheel, index, rng, epsilon)
    turns = rng.randint(min_turns, max_turns)
    start = normalize_angle(start_rotation)
    final = turns * TWO_PI + target_angle - normalize_angle(pointer_angle)

    plan = SpinPlan(
        target_index=index,
        target_angle=target_angle,
        turns=turns,
        start_rotation=start,
        final_rotation=final,
        duration_ms=duration_ms,
        easing=easing,
    )
    logger.debug(
        f"Planned spin: segment {index}, target {target_angle:.4f} rad, "
        f"{turns} turns, {duration_ms:.0f}ms"
    )
    return plan
