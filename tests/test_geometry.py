import math

import pytest

from spatial_led.geometry import (
    LineSegment,
    angle_of,
    from_angle,
    inverse_lerp,
    lerp,
    normalize,
)


def test_lerp_hits_both_endpoints_exactly():
    a, b = (0.1, -3.7), (0.3, 9.1)

    assert lerp(a, b, 0.0) == a
    assert lerp(a, b, 1.0) == b


@pytest.mark.parametrize(
    'a, b, c, expected',
    [
        ((0.0, 0.0), (10.0, 0.0), (2.5, 0.0), 0.25),
        ((10.0, -5.0), (10.0, 5.0), (10.0, 0.0), 0.5),
        ((0.0, 0.0), (1.0, 4.0), (0.75, 3.0), 0.75),
    ],
)
def test_inverse_lerp_uses_dominant_axis(a, b, c, expected):
    assert inverse_lerp(a, b, c) == pytest.approx(expected)


def test_normalize_rejects_zero_vector():
    with pytest.raises(ValueError):
        normalize((0.0, 0.0))


def test_angle_of_is_in_full_turn_range():
    assert angle_of((1.0, 0.0)) == 0.0
    assert angle_of((0.0, -1.0)) == pytest.approx(1.5 * math.pi)
    x, y = from_angle(math.pi / 3)
    assert angle_of((x, y)) == pytest.approx(math.pi / 3)


@pytest.mark.parametrize(
    'length, density, expected',
    [(10.0, 1.0, 10), (10.0, 1.1, 11), (0.2, 1.0, 1), (3.0, 0.0, 1), (2.5, 1.0, 3)],
)
def test_num_leds_rounds_with_minimum_of_one(length, density, expected):
    seg = LineSegment((0.0, 0.0), (length, 0.0), density)

    assert seg.num_leds == expected


def test_intersects_line_reports_crossing_point():
    seg = LineSegment((10.0, -5.0), (10.0, 5.0), 1.0)

    point = seg.intersects_line((0.0, 0.0), (20.0, 0.0))

    assert point == pytest.approx((10.0, 0.0))


def test_intersects_line_misses_short_and_parallel_lines():
    seg = LineSegment((10.0, -5.0), (10.0, 5.0), 1.0)

    assert seg.intersects_line((0.0, 0.0), (5.0, 0.0)) is None
    assert seg.intersects_line((0.0, -5.0), (0.0, 5.0)) is None


def test_closest_to_point_clamps_to_segment():
    seg = LineSegment((0.0, 0.0), (10.0, 0.0), 1.0)

    point, t = seg.closest_to_point((3.0, 4.0))
    assert point == pytest.approx((3.0, 0.0))
    assert t == pytest.approx(0.3)

    point, t = seg.closest_to_point((-5.0, 1.0))
    assert point == (0.0, 0.0)
    assert t == 0.0


def test_intersects_circle_returns_both_crossings():
    seg = LineSegment((0.0, 0.0), (10.0, 0.0), 1.0)

    assert seg.intersects_circle((5.0, 0.0), 3.0) == pytest.approx([0.2, 0.8])


def test_intersects_circle_tangent_and_miss():
    seg = LineSegment((0.0, 0.0), (10.0, 0.0), 1.0)

    assert seg.intersects_circle((5.0, 3.0), 3.0) == pytest.approx([0.5])
    assert seg.intersects_circle((5.0, 5.0), 3.0) == []


def test_intersects_circle_ignores_crossings_beyond_segment():
    seg = LineSegment((0.0, 0.0), (10.0, 0.0), 1.0)

    assert seg.intersects_circle((0.0, 0.0), 4.0) == pytest.approx([0.4])
    assert seg.intersects_circle((5.0, 0.0), 100.0) == []


def test_intersects_solid_circle_clips_to_segment():
    seg = LineSegment((0.0, 0.0), (10.0, 0.0), 1.0)

    assert seg.intersects_solid_circle((5.0, 0.0), 3.0) == pytest.approx([0.2, 0.8])
    assert seg.intersects_solid_circle((5.0, 0.0), 100.0) == [0.0, 1.0]
    assert seg.intersects_solid_circle((0.0, 0.0), 4.0) == pytest.approx([0.0, 0.4])
    assert seg.intersects_solid_circle((5.0, 5.0), 3.0) == []
    assert seg.intersects_solid_circle((20.0, 0.0), 3.0) == []
