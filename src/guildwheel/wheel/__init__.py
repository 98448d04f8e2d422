"""Wheel data model and geometry."""

from guildwheel.wheel.models import Candidate, CandidateSet, SpinCriteria, SpinResult
from guildwheel.wheel.geometry import (
    ColorMode,
    Segment,
    SegmentLayout,
    angle_to_index,
    layout,
    pointer_index,
    segment_range,
)

__all__ = [
    "Candidate",
    "CandidateSet",
    "SpinCriteria",
    "SpinResult",
    "ColorMode",
    "Segment",
    "SegmentLayout",
    "angle_to_index",
    "layout",
    "pointer_index",
    "segment_range",
]
