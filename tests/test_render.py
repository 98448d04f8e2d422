from __future__ import annotations

import math
import random

import numpy as np
import pytest

from guildwheel.graphics.primitives import new_buffer
from guildwheel.graphics.wheel import (
    DEFAULT_STYLE,
    render_wheel,
    segment_index_map,
    wheel_geometry,
)
from guildwheel.wheel.geometry import angle_to_index, layout, pointer_index
from guildwheel.wheel.models import CandidateSet

SIZE = 64


@pytest.fixture
def buffer():
    return new_buffer(SIZE, SIZE)


@pytest.fixture
def wheel(abcd):
    return layout(abcd)


def _pixel(buffer, screen_angle, fraction=0.8):
    cx, cy, radius = wheel_geometry(buffer)
    x = cx + math.cos(screen_angle) * radius * fraction
    y = cy + math.sin(screen_angle) * radius * fraction
    return tuple(int(v) for v in buffer[int(round(y)), int(round(x))])


def test_segments_painted_at_rest(buffer, wheel):
    render_wheel(buffer, wheel, rotation=0.0)
    for segment in wheel.segments:
        assert _pixel(buffer, segment.mid_angle) == segment.color


def test_rotation_moves_segments(buffer, wheel):
    render_wheel(buffer, wheel, rotation=math.pi / 2)
    # Screen angle phi shows wheel angle phi + rotation
    assert _pixel(buffer, math.pi / 4) == wheel.segments[1].color
    assert _pixel(buffer, 5 * math.pi / 4) == wheel.segments[3].color


@pytest.mark.parametrize("rotation", [0.3, 2.0, 3.9, 27.1])
def test_segment_under_pointer_matches_pointer_index(buffer, wheel, rotation):
    render_wheel(buffer, wheel, rotation)
    # Sample slightly off the pointer axis
    index = pointer_index(wheel, rotation + 0.25)
    assert _pixel(buffer, 0.25, fraction=0.55) == wheel.segments[index].color


def test_index_map_agrees_with_geometry(wheel):
    rotation = 1.1
    cx, cy, _ = wheel_geometry(new_buffer(SIZE, SIZE))
    index_map = segment_index_map(wheel, rotation, (SIZE, SIZE), (cx, cy))
    rng = random.Random(0)
    for _ in range(200):
        x, y = rng.randrange(SIZE), rng.randrange(SIZE)
        if (x, y) == (cx, cy):
            continue
        angle = math.atan2(y - cy, x - cx) + rotation
        assert index_map[y, x] == angle_to_index(wheel, angle)


def test_rendering_is_pure(wheel):
    first = new_buffer(SIZE, SIZE)
    second = new_buffer(SIZE, SIZE, (255, 0, 0))
    render_wheel(first, wheel, 2.5, highlight=True)
    render_wheel(second, wheel, 2.5, highlight=True)
    assert np.array_equal(first, second)


def test_highlight_brightens_winner(wheel):
    plain = new_buffer(SIZE, SIZE)
    lit = new_buffer(SIZE, SIZE)
    rotation = 0.4
    render_wheel(plain, wheel, rotation)
    render_wheel(lit, wheel, rotation, highlight=True)

    winner = wheel.segments[pointer_index(wheel, rotation + 0.3)]
    other = wheel.segments[pointer_index(wheel, rotation + 0.3 + math.pi)]
    assert sum(_pixel(lit, 0.3, 0.55)) > sum(_pixel(plain, 0.3, 0.55))
    assert _pixel(plain, 0.3, 0.55) == winner.color
    assert _pixel(lit, 0.3 + math.pi, 0.55) == other.color


def test_empty_wheel_placeholder(buffer):
    render_wheel(buffer, layout(CandidateSet()), rotation=1.0)
    assert _pixel(buffer, 2.0, 0.5) == DEFAULT_STYLE.placeholder
    assert tuple(int(v) for v in buffer[0, 0]) == DEFAULT_STYLE.background


def test_pointer_is_drawn(buffer, wheel):
    render_wheel(buffer, wheel, 0.0)
    cx, cy, radius = wheel_geometry(buffer)
    x = int(round(cx + radius + 2))
    y = int(round(cy))
    assert tuple(int(v) for v in buffer[y, x]) == DEFAULT_STYLE.pointer
