"""Basic drawing primitives for wheel buffers."""

from typing import Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Point = Tuple[float, float]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    """Allocate an RGB buffer of shape (height, width, 3)."""
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def draw_circle(
    buffer: Buffer,
    cx: float,
    cy: float,
    radius: float,
    color: Color,
    filled: bool = True,
    thickness: float = 1.0,
) -> None:
    """Draw a circle on the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        cx: Center x coordinate
        cy: Center y coordinate
        radius: Circle radius in pixels
        color: RGB color tuple
        filled: If True, fill circle; if False, draw a ring of `thickness`
        thickness: Ring width for outlines
    """
    h, w = buffer.shape[:2]
    y_indices, x_indices = np.ogrid[:h, :w]
    dist_sq = (x_indices - cx) ** 2 + (y_indices - cy) ** 2

    if filled:
        mask = dist_sq <= radius ** 2
    else:
        inner = max(0.0, radius - thickness)
        mask = (dist_sq <= radius ** 2) & (dist_sq > inner ** 2)
    buffer[mask] = color


def draw_line(
    buffer: Buffer,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    color: Color,
) -> None:
    """Draw a line using Bresenham's algorithm.

    Args:
        buffer: Target numpy array (height, width, 3)
        x1, y1: Start point
        x2, y2: End point
        color: RGB color tuple
    """
    h, w = buffer.shape[:2]

    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    x, y = x1, y1

    while True:
        if 0 <= x < w and 0 <= y < h:
            buffer[y, x] = color

        if x == x2 and y == y2:
            break

        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def fill_convex_polygon(buffer: Buffer, points: Sequence[Point], color: Color) -> None:
    """Fill a convex polygon given its vertices in order (either winding)."""
    if len(points) < 3:
        return

    h, w = buffer.shape[:2]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    x0, x1 = max(0, int(np.floor(min(xs)))), min(w, int(np.ceil(max(xs))) + 1)
    y0, y1 = max(0, int(np.floor(min(ys)))), min(h, int(np.ceil(max(ys))) + 1)
    if x0 >= x1 or y0 >= y1:
        return

    py, px = np.mgrid[y0:y1, x0:x1]
    positive = np.ones(px.shape, dtype=bool)
    negative = np.ones(px.shape, dtype=bool)

    for (ax, ay), (bx, by) in zip(points, list(points[1:]) + [points[0]]):
        cross = (bx - ax) * (py - ay) - (by - ay) * (px - ax)
        positive &= cross >= 0
        negative &= cross <= 0

    region = buffer[y0:y1, x0:x1]
    region[positive | negative] = color


def blend(buffer: Buffer, mask: NDArray[np.bool_], color: Color, alpha: float) -> None:
    """Blend a color over the masked pixels."""
    if alpha <= 0:
        return
    alpha = min(1.0, alpha)
    src = np.array(color, dtype=np.float32)
    pixels = buffer[mask].astype(np.float32)
    buffer[mask] = (pixels * (1 - alpha) + src * alpha).astype(np.uint8)
