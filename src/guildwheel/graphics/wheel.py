"""Wheel rendering.

render_wheel() is a pure function of (layout, rotation): the same inputs
always paint the same pixels. Every pixel is classified with the same
angle -> segment rule the geometry engine uses, so what is drawn under the
pointer is exactly what pointer_index() reports.
"""

from dataclasses import dataclass
import math

import numpy as np

from guildwheel.graphics.primitives import (
    Buffer,
    Color,
    blend,
    clear,
    draw_circle,
    draw_line,
    fill_convex_polygon,
)
from guildwheel.wheel.geometry import (
    ANGLE_TOLERANCE,
    TWO_PI,
    SegmentLayout,
    pointer_index,
)


@dataclass(frozen=True)
class WheelStyle:
    """Colors and proportions of the rendered wheel."""

    background: Color = (15, 15, 35)
    placeholder: Color = (240, 240, 240)
    outline: Color = (204, 204, 204)
    separator: Color = (255, 255, 255)
    hub: Color = (51, 51, 51)
    pointer: Color = (255, 215, 0)
    highlight: Color = (255, 255, 255)
    highlight_alpha: float = 0.35
    margin: int = 6
    hub_ratio: float = 0.11


DEFAULT_STYLE = WheelStyle()


def wheel_geometry(buffer: Buffer, style: WheelStyle = DEFAULT_STYLE) -> tuple[float, float, float]:
    """Center and radius of the wheel inside a buffer."""
    h, w = buffer.shape[:2]
    return (w - 1) / 2, (h - 1) / 2, min(w, h) / 2 - style.margin


def segment_index_map(
    wheel: SegmentLayout,
    rotation: float,
    shape: tuple[int, int],
    center: tuple[float, float],
) -> np.ndarray:
    """Segment index shown at every pixel.

    Screen angle phi displays wheel angle phi + rotation.
    """
    h, w = shape
    cx, cy = center
    ys, xs = np.ogrid[:h, :w]
    screen = np.arctan2(ys - cy, xs - cx)
    rel = np.mod(screen + rotation - wheel.zero_offset, TWO_PI)
    index = np.floor((rel + ANGLE_TOLERANCE) / wheel.segment_width).astype(np.int64)
    return np.mod(index, len(wheel.segments))


def render_wheel(
    buffer: Buffer,
    wheel: SegmentLayout,
    rotation: float,
    pointer_angle: float = 0.0,
    highlight: bool = False,
    style: WheelStyle = DEFAULT_STYLE,
) -> None:
    """Paint the wheel into an RGB buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        wheel: Segment layout to draw
        rotation: Current wheel rotation in radians
        pointer_angle: Screen angle of the fixed pointer
        highlight: Brighten the segment under the pointer (winner reveal)
        style: Colors and proportions
    """
    cx, cy, radius = wheel_geometry(buffer, style)
    clear(buffer, style.background)

    if wheel.is_empty:
        # Placeholder: no spin possible until candidates arrive
        draw_circle(buffer, cx, cy, radius, style.placeholder)
        draw_circle(buffer, cx, cy, radius, style.outline, filled=False, thickness=2)
        _draw_pointer(buffer, cx, cy, radius, pointer_angle, style)
        return

    h, w = buffer.shape[:2]
    ys, xs = np.ogrid[:h, :w]
    inside = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius ** 2

    index_map = segment_index_map(wheel, rotation, (h, w), (cx, cy))
    colors = np.array([s.color for s in wheel.segments], dtype=np.uint8)
    painted = colors[index_map]
    buffer[inside] = painted[inside]

    if highlight:
        winner = pointer_index(wheel, rotation, pointer_angle)
        blend(buffer, inside & (index_map == winner), style.highlight, style.highlight_alpha)

    if len(wheel.segments) > 1:
        for segment in wheel.segments:
            angle = segment.start - rotation
            draw_line(
                buffer,
                int(round(cx)),
                int(round(cy)),
                int(round(cx + math.cos(angle) * radius)),
                int(round(cy + math.sin(angle) * radius)),
                style.separator,
            )

    draw_circle(buffer, cx, cy, radius, style.separator, filled=False, thickness=2)
    draw_circle(buffer, cx, cy, radius * style.hub_ratio, style.hub)
    _draw_pointer(buffer, cx, cy, radius, pointer_angle, style)


def _draw_pointer(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    pointer_angle: float,
    style: WheelStyle,
) -> None:
    """Triangle on the rim pointing at the wheel center."""
    ux, uy = math.cos(pointer_angle), math.sin(pointer_angle)
    size = max(4.0, radius * 0.09)
    tip = (cx + ux * (radius - size), cy + uy * (radius - size))
    base = (cx + ux * (radius + style.margin - 1), cy + uy * (radius + style.margin - 1))
    half = size * 0.6
    fill_convex_polygon(
        buffer,
        [
            tip,
            (base[0] - uy * half, base[1] + ux * half),
            (base[0] + uy * half, base[1] - ux * half),
        ],
        style.pointer,
    )
