from __future__ import annotations

import pytest

from guildwheel.animation.easing import (
    Easing,
    easing_names,
    get_easing,
    interpolate,
)

DECELERATING = [name for name in easing_names() if name != "linear"]


@pytest.mark.parametrize("name", DECELERATING)
def test_curve_endpoints(name):
    func = get_easing(name)
    assert func(0.0) == pytest.approx(0.0, abs=1e-12)
    assert func(1.0) == pytest.approx(1.0, abs=1e-12)


@pytest.mark.parametrize("name", DECELERATING)
def test_curve_strictly_increasing(name):
    func = get_easing(name)
    values = [func(i / 1000) for i in range(1001)]
    assert all(b > a for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("name", DECELERATING)
def test_curve_slows_down_at_the_end(name):
    func = get_easing(name)
    h = 1e-3
    start_slope = (func(h) - func(0.0)) / h
    end_slope = (func(1.0) - func(1.0 - h)) / h
    assert end_slope < 0.05
    assert start_slope > 1.0


def test_get_easing_by_enum_and_name():
    assert get_easing(Easing.EASE_OUT_CUBIC) is get_easing("EASE_OUT_CUBIC")
    assert get_easing("ease_out_quad")(0.5) == pytest.approx(0.75)


def test_unknown_easing():
    with pytest.raises(ValueError):
        get_easing("bounce_around")


def test_interpolate_clamps_and_lands_exactly():
    assert interpolate(10.0, 20.0, -1.0, "ease_out_cubic") == 10.0
    assert interpolate(0.1, 0.7, 1.0, "ease_out_sine") == 0.7
    assert interpolate(0.1, 0.7, 3.0, "ease_out_sine") == 0.7
    assert interpolate(0.0, 10.0, 0.5) == pytest.approx(5.0)

