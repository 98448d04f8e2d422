"""Wheel geometry: segment boundaries, colors and label placement.

Everything here is a pure function of the candidate list. Angles are in
radians, measured clockwise on screen (y axis pointing down), and segment i
of N spans [zero_offset + i*2pi/N, zero_offset + (i+1)*2pi/N).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import colorsys
import math

from guildwheel.wheel.models import Candidate, CandidateSet

Color = Tuple[int, int, int]

TWO_PI = 2 * math.pi

# Boundary tolerance for inverse lookup
ANGLE_TOLERANCE = 1e-9

# Segment palette of the guild front-end (#FF6B6B, #4ECDC4, ...)
DEFAULT_PALETTE: Tuple[Color, ...] = (
    (255, 107, 107),
    (78, 205, 196),
    (69, 183, 209),
    (150, 206, 180),
    (255, 234, 167),
    (221, 160, 221),
    (152, 216, 200),
    (247, 220, 111),
)


class ColorMode(str, Enum):
    """How segment colors are derived from the segment index."""

    PALETTE = "palette"  # palette[i % len(palette)]
    HUE = "hue"          # evenly spaced hues around the color wheel


@dataclass(frozen=True)
class Segment:
    """One angular slice of the wheel.

    Attributes:
        index: Position in the candidate list
        candidate: Candidate drawn in this slice
        start: Start angle (inclusive)
        end: End angle (exclusive), always start + width
        color: RGB fill color
        label_angle: Rotation applied to the label text
        label_radius: Label anchor distance as a fraction of the wheel radius
    """

    index: int
    candidate: Candidate
    start: float
    end: float
    color: Color
    label_angle: float
    label_radius: float

    @property
    def width(self) -> float:
        return self.end - self.start

    @property
    def mid_angle(self) -> float:
        return (self.start + self.end) / 2

    def contains(self, angle: float) -> bool:
        """Check if an angle (any turn) falls in [start, end)."""
        rel = normalize_angle(angle - self.start)
        return rel < self.width - ANGLE_TOLERANCE or rel >= TWO_PI - ANGLE_TOLERANCE


@dataclass(frozen=True)
class SegmentLayout:
    """Full partition of the circle for a candidate set."""

    candidates: CandidateSet
    segments: Tuple[Segment, ...]
    zero_offset: float = 0.0

    @property
    def is_empty(self) -> bool:
        """True for the "no segments" layout of an empty candidate set."""
        return not self.segments

    @property
    def segment_width(self) -> float:
        if not self.segments:
            return 0.0
        return TWO_PI / len(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2pi)."""
    wrapped = angle % TWO_PI
    # -1e-17 % 2pi rounds to exactly 2pi
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


def segment_color(
    index: int,
    count: int,
    mode: ColorMode = ColorMode.PALETTE,
    palette: Sequence[Color] = DEFAULT_PALETTE,
) -> Color:
    """Color for a segment, a pure function of its index."""
    if mode == ColorMode.HUE:
        r, g, b = colorsys.hsv_to_rgb((index / max(1, count)) % 1.0, 0.55, 0.95)
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))
    if not palette:
        raise ValueError("Palette must not be empty")
    return tuple(palette[index % len(palette)])


def layout(
    candidates: CandidateSet,
    zero_offset: float = 0.0,
    color_mode: ColorMode = ColorMode.PALETTE,
    palette: Sequence[Color] = DEFAULT_PALETTE,
    label_radius: float = 0.7,
) -> SegmentLayout:
    """Compute the segment layout for a candidate set.

    Args:
        candidates: Candidates in wheel order
        zero_offset: Angle where segment 0 starts (0 = 3 o'clock, -pi/2 = top)
        color_mode: Palette lookup or evenly spaced hues
        palette: Colors used in palette mode, wrapped with modulo
        label_radius: Label anchor as a fraction of the wheel radius

    Returns:
        Layout with one segment per candidate; an empty candidate set gives
        the "no segments" layout.
    """
    if not isinstance(candidates, CandidateSet):
        candidates = CandidateSet(candidates)

    offset = normalize_angle(zero_offset)
    count = len(candidates)
    segments = []

    for i, candidate in enumerate(candidates):
        # Both bounds from the same formula so neighbours share an exact edge
        start = offset + TWO_PI * i / count
        end = offset + TWO_PI * (i + 1) / count
        segments.append(Segment(
            index=i,
            candidate=candidate,
            start=start,
            end=end,
            color=segment_color(i, count, color_mode, palette),
            label_angle=(start + end) / 2 + math.pi / 2,
            label_radius=label_radius,
        ))

    return SegmentLayout(
        candidates=candidates,
        segments=tuple(segments),
        zero_offset=offset,
    )


def angle_to_index(wheel: SegmentLayout, angle: float) -> int:
    """Index of the segment containing a wheel-frame angle.

    An angle exactly on a boundary belongs to the segment that starts there.

    Raises:
        ValueError: If the layout has no segments
    """
    if wheel.is_empty:
        raise ValueError("Cannot look up an angle on an empty wheel")

    count = len(wheel.segments)
    rel = normalize_angle(angle - wheel.zero_offset)
    index = int((rel + ANGLE_TOLERANCE) / wheel.segment_width)
    # Just below a full turn is the boundary of segment 0
    return index % count


def segment_range(wheel: SegmentLayout, index: int) -> Tuple[float, float]:
    """Angle range [start, end) of a segment."""
    if not 0 <= index < len(wheel.segments):
        raise IndexError(f"Segment index {index} out of range for {len(wheel.segments)} segments")
    segment = wheel.segments[index]
    return segment.start, segment.end


def pointer_index(
    wheel: SegmentLayout,
    rotation: float,
    pointer_angle: float = 0.0,
) -> Optional[int]:
    """Segment currently under the fixed pointer, or None on an empty wheel.

    A wheel-frame angle theta is shown at screen angle theta - rotation, so
    the pointer at screen angle p reads wheel angle p + rotation.
    """
    if wheel.is_empty:
        return None
    return angle_to_index(wheel, pointer_angle + rotation)


def label_position(
    segment: Segment,
    center: Tuple[float, float],
    radius: float,
    rotation: float = 0.0,
) -> Tuple[float, float]:
    """Screen position of a segment's label anchor at a given rotation."""
    angle = segment.mid_angle - rotation
    distance = radius * segment.label_radius
    return (
        center[0] + math.cos(angle) * distance,
        center[1] + math.sin(angle) * distance,
    )
