import math

import pytest

from spatial_led import BLACK, WHITE, Filter, LayoutConfig, SegmentSpec, Sled, ValidationError


def _square_sled():
    corners = [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0), (-1.0, -1.0)]
    specs = [SegmentSpec(a, b) for a, b in zip(corners, corners[1:])]
    return Sled(LayoutConfig(center_point=(0.0, 0.0), density=2.0, segments=specs))


def test_filter_is_sorted_and_duplicate_free():
    selection = Filter([5, 1, 3, 1, 5])

    assert selection.indices == (1, 3, 5)
    assert list(selection) == [1, 3, 5]
    assert len(selection) == 3
    assert 3 in selection
    assert 4 not in selection
    assert selection.max_index() == 5
    assert Filter().max_index() == -1
    assert not Filter()


def test_filter_set_algebra():
    a = Filter([1, 2, 3, 4])
    b = Filter([3, 4, 5])

    assert a | b == Filter([1, 2, 3, 4, 5])
    assert a & b == Filter([3, 4])
    assert a - b == Filter([1, 2])
    assert a.union(b) == a | b
    assert a.intersection(b) == a & b
    assert a.difference(b) == a - b
    assert a.complement(6) == Filter([0, 5])


def test_filters_are_hashable_values():
    assert Filter([2, 1]) == Filter.from_indices([1, 2])
    assert hash(Filter([2, 1])) == hash(Filter([1, 2]))
    assert Filter.from_range(0, 3) == Filter([0, 1, 2])
    assert len({Filter([1]), Filter([1])}) == 1


def test_filter_rejects_negative_indices():
    with pytest.raises(ValueError):
        Filter([0, -1])


def test_predicate_filters(strip_sled):
    assert strip_sled.filter_by_pos(lambda p: p[0] < 2.5) == Filter([0, 1, 2])
    assert strip_sled.filter(lambda led: led.index % 5 == 0) == Filter([0, 5, 10])
    assert strip_sled.filter_by_dir(lambda d: d[0] > 0.0) == Filter(range(6, 11))
    assert strip_sled.filter_by_angle(lambda a: a > 1.5 * math.pi + 1e-9) == Filter(range(6, 11))
    assert strip_sled.filter_by_dist(lambda d: d < 5.5) == Filter(range(3, 8))
    assert strip_sled.filter_by_dist_from((0.0, 0.0), lambda d: d <= 1.5) == Filter([0, 1])


def test_angle_range_wraps_around_zero():
    sled = _square_sled()
    lo, hi = -math.pi / 4 - 0.01, math.pi / 4 + 0.01

    selection = sled.angle_range(lo, hi)

    assert selection == Filter([3, 4, 5, 6, 7, 8])
    expected = sled.filter_by_angle(lambda a: a <= hi or a >= lo + math.tau)
    assert selection == expected


def test_angle_range_without_wrap():
    sled = _square_sled()

    assert sled.angle_range(0.5, 1.0) == Filter([7, 8])
    assert sled.angle_range(0.5 + math.tau, 1.0 + math.tau) == Filter([7, 8])


def test_full_turn_selects_everything():
    sled = _square_sled()

    assert sled.angle_range(0.0, math.tau) == Filter(range(16))
    assert sled.angle_range(-10.0, 10.0) == Filter(range(16))


@pytest.mark.parametrize('lo, hi', [(1.0, 0.5), (math.nan, 1.0), (0.0, math.inf)])
def test_invalid_angle_range(lo, hi):
    with pytest.raises(ValidationError):
        _square_sled().angle_range(lo, hi)


def test_filter_accessors(strip_sled):
    selection = strip_sled.filter_by_pos(lambda p: p[0] > 7.5)

    strip_sled.set_filter(selection, WHITE)
    assert [led.index for led in strip_sled.get_filter(selection)] == [8, 9, 10]
    strip_sled.modulate_filter(Filter([8]), lambda led: led.color * 0.5)
    visited = []
    strip_sled.for_each_in_filter(selection, lambda led: visited.append(led.color))

    assert visited == [WHITE * 0.5, WHITE, WHITE]


def test_filter_application_is_idempotent(strip_sled):
    selection = strip_sled.vertices() | Filter([4])

    strip_sled.set_filter(selection, WHITE)
    once = strip_sled.colors()
    strip_sled.set_filter(selection, WHITE)

    assert strip_sled.colors() == once


def test_filter_past_the_buffer_is_rejected_before_mutation(strip_sled):
    with pytest.raises(ValidationError):
        strip_sled.set_filter(Filter([1, 11]), WHITE)
    with pytest.raises(ValidationError):
        strip_sled.get_filter(Filter([42]))

    assert all(color == BLACK for color in strip_sled.colors())


def test_maps(strip_sled):
    strip_sled.map_by_index(lambda i: WHITE if i == 0 else BLACK)
    assert strip_sled.get(0).color == WHITE

    strip_sled.map_by_segment(lambda s: WHITE * (s + 1))
    assert all(color == WHITE for color in strip_sled.colors())

    strip_sled.map_by_pos(lambda p: WHITE * (p[0] / 10.0))
    assert strip_sled.get(10).color.as_tuple() == pytest.approx((1.0, 1.0, 1.0))

    strip_sled.map_by_dist(lambda d: WHITE * d)
    assert strip_sled.get(5).color.as_tuple() == pytest.approx((5.0, 5.0, 5.0))

    strip_sled.map_by_dist_from((0.0, 0.0), lambda d: WHITE * d)
    assert strip_sled.get(3).color.as_tuple() == pytest.approx((3.0, 3.0, 3.0))

    strip_sled.map_by_angle(lambda a: WHITE * a)
    assert strip_sled.get(5).color.as_tuple() == pytest.approx((1.5 * math.pi,) * 3)

    strip_sled.map_by_dir(lambda d: WHITE * d[1])
    assert strip_sled.get(5).color.as_tuple() == pytest.approx((-1.0, -1.0, -1.0))


def test_filter_from_leds(strip_sled):
    assert Filter.from_leds(strip_sled.get_range(2, 4)) == Filter([2, 3])
