"""Easing curves for the wheel spin.

Each curve maps normalized time t in [0, 1] to normalized progress. Apart
from LINEAR (kept for tests and tooling) they all decelerate: strictly
increasing, 0 at t=0, 1 at t=1, and flat as t approaches 1 so the wheel
visibly slows into its resting angle.
"""

from enum import Enum, auto
from typing import Callable
import math


class Easing(Enum):
    """Available easing curves."""

    LINEAR = auto()
    EASE_OUT_QUAD = auto()
    EASE_OUT_CUBIC = auto()
    EASE_OUT_QUART = auto()
    EASE_OUT_QUINT = auto()
    EASE_OUT_SINE = auto()
    EASE_OUT_EXPO = auto()
    EASE_OUT_CIRC = auto()


EasingFunc = Callable[[float], float]


def linear(t: float) -> float:
    return t


def _ease_out_power(power: int) -> EasingFunc:
    def ease(t: float) -> float:
        return 1 - (1 - t) ** power

    ease.__name__ = f"ease_out_pow{power}"
    return ease


ease_out_quad = _ease_out_power(2)
ease_out_cubic = _ease_out_power(3)
ease_out_quart = _ease_out_power(4)
ease_out_quint = _ease_out_power(5)


def ease_out_sine(t: float) -> float:
    return math.sin(t * math.pi / 2)


def ease_out_expo(t: float) -> float:
    """Exponential decay, rescaled to pass exactly through 0 and 1."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    return (1 - 2 ** (-10 * t)) / (1 - 2 ** -10)


def ease_out_circ(t: float) -> float:
    return math.sqrt(1 - (t - 1) ** 2)


_CURVES: dict[Easing, EasingFunc] = {
    Easing.LINEAR: linear,
    Easing.EASE_OUT_QUAD: ease_out_quad,
    Easing.EASE_OUT_CUBIC: ease_out_cubic,
    Easing.EASE_OUT_QUART: ease_out_quart,
    Easing.EASE_OUT_QUINT: ease_out_quint,
    Easing.EASE_OUT_SINE: ease_out_sine,
    Easing.EASE_OUT_EXPO: ease_out_expo,
    Easing.EASE_OUT_CIRC: ease_out_circ,
}

_BY_NAME: dict[str, Easing] = {easing.name.lower(): easing for easing in Easing}


def easing_names() -> list[str]:
    """Names accepted by get_easing()."""
    return sorted(_BY_NAME)


def get_easing(easing: Easing | str) -> EasingFunc:
    """Look up an easing curve by enum member or name (case-insensitive).

    Raises:
        ValueError: If the name is not recognized
    """
    if isinstance(easing, str):
        member = _BY_NAME.get(easing.lower())
        if member is None:
            raise ValueError(f"Unknown easing function: {easing}")
        easing = member
    return _CURVES[easing]


def interpolate(start: float, end: float, t: float, easing: Easing | str = Easing.LINEAR) -> float:
    """Eased value between start and end.

    t is clamped to [0, 1]; at t >= 1 the result is exactly `end`.
    """
    t = max(0.0, min(1.0, t))
    if t >= 1.0:
        return end
    return start + (end - start) * get_easing(easing)(t)
