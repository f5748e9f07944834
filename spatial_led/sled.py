"""The spatial index: an LED buffer laid out along line segments, queried geometrically."""

from __future__ import annotations

import dataclasses
import logging
import math
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from . import queries
from .color import BLACK
from .config import LayoutConfig, load_layout
from .errors import ConstructionError, LedLookupError, ValidationError
from .filter import Filter
from .geometry import LineSegment, Point2D, Vector2D, as_point, from_angle, is_finite_point
from .layout import build_layout
from .led import Led
from .queries import RayHit

logger = logging.getLogger(__name__)

ColorRule = Callable[[Led], Any]


def _is_index(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _check_point(pos: Sequence[float]) -> Point2D:
    try:
        point = as_point(pos)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"invalid point {pos!r}") from exc
    if not is_finite_point(point):
        raise ValidationError(f"point must be finite, got {point!r}")
    return point


class Sled:
    """LEDs placed along the segments of a room layout.

    Construction validates the layout and precomputes the LED buffer and its
    lookup tables; afterwards only LED colors change. Methods are synchronous
    and never lock, so callers sharing a ``Sled`` between threads must guard
    it themselves. Bulk mutators validate their whole request before touching
    any LED.
    """

    def __init__(self, config: LayoutConfig, *, default_color: Any = BLACK) -> None:
        layout = build_layout(config, default_color)
        self._center_point = layout.center_point
        self._leds = layout.leds
        self._line_segments = layout.line_segments
        self._endpoints = layout.segment_endpoint_indices
        self._vertex_indices = layout.vertex_indices
        self._angle_order = layout.angle_order
        self._sorted_angles = layout.sorted_angles
        self._positions = np.array([led.position for led in self._leds], dtype=float)

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs: Any) -> "Sled":
        try:
            config = load_layout(path)
        except ValueError as exc:
            raise ConstructionError(f"invalid layout file {path}: {exc}") from exc
        return cls(config, **kwargs)

    @classmethod
    def from_text(cls, text: str, **kwargs: Any) -> "Sled":
        from .parser import parse_layout

        return cls(parse_layout(text), **kwargs)

    # ------------------------------------------------------------------
    # Layout info and buffer-level access

    @property
    def center_point(self) -> Point2D:
        return self._center_point

    @property
    def num_leds(self) -> int:
        return len(self._leds)

    @property
    def num_segments(self) -> int:
        return len(self._line_segments)

    @property
    def num_vertices(self) -> int:
        return len(self._vertex_indices)

    @property
    def leds(self) -> Tuple[Led, ...]:
        return tuple(self._leds)

    @property
    def line_segments(self) -> Tuple[LineSegment, ...]:
        return tuple(self._line_segments)

    @property
    def segment_endpoint_indices(self) -> Tuple[Tuple[int, int], ...]:
        return tuple(self._endpoints)

    @property
    def vertex_indices(self) -> Tuple[int, ...]:
        return tuple(self._vertex_indices)

    @property
    def angle_order(self) -> Tuple[int, ...]:
        """LED indices sorted by angle around the center point."""

        return tuple(int(i) for i in self._angle_order)

    @property
    def domain(self) -> Tuple[Point2D, Point2D]:
        """Bounding box ``(min_corner, max_corner)`` of all LED positions."""

        lo = self._positions.min(axis=0)
        hi = self._positions.max(axis=0)
        return (float(lo[0]), float(lo[1])), (float(hi[0]), float(hi[1]))

    def read(self) -> List[Led]:
        """Snapshot copies of every LED; mutating them does not affect the buffer."""

        return [dataclasses.replace(led) for led in self._leds]

    def colors(self) -> List[Any]:
        return [led.color for led in self._leds]

    def positions(self) -> np.ndarray:
        return self._positions.copy()

    def colors_and_positions(self) -> List[Tuple[Any, Point2D]]:
        return [(led.color, led.position) for led in self._leds]

    # ------------------------------------------------------------------
    # Shared helpers

    def _has_index(self, index: object) -> bool:
        return _is_index(index) and 0 <= index < len(self._leds)

    def _check_range(self, start: int, stop: int, limit: int, what: str) -> None:
        if not (_is_index(start) and _is_index(stop)):
            raise ValidationError(f"{what} range bounds must be integers, got {start!r}..{stop!r}")
        if start > stop:
            raise ValidationError(f"{what} range {start}..{stop} is inverted")
        if start < 0 or stop > limit:
            raise ValidationError(f"{what} range {start}..{stop} exceeds 0..{limit}")

    def _check_filter(self, selection: Filter) -> None:
        if selection.max_index() >= len(self._leds):
            raise ValidationError(
                f"filter refers to LED {selection.max_index()} but only {len(self._leds)} exist"
            )

    def _assign(self, indices: Iterable[int], color: Any) -> None:
        for i in indices:
            self._leds[i].color = color

    def _modulate(self, indices: Iterable[int], rule: ColorRule) -> None:
        # colors are computed first so a failing rule leaves the buffer untouched
        targets = [self._leds[i] for i in indices]
        new_colors = [rule(led) for led in targets]
        for led, color in zip(targets, new_colors):
            led.color = color

    def _segment_bounds(self, segment_index: int) -> Optional[Tuple[int, int]]:
        if _is_index(segment_index) and 0 <= segment_index < len(self._endpoints):
            return self._endpoints[segment_index]
        return None

    def _segment_or_raise(self, segment_index: int) -> Tuple[int, int]:
        bounds = self._segment_bounds(segment_index)
        if bounds is None:
            raise LedLookupError(f"No line segment of index {segment_index} exists.")
        return bounds

    def _vertex_led_index(self, vertex_index: int) -> Optional[int]:
        if _is_index(vertex_index) and 0 <= vertex_index < len(self._vertex_indices):
            return self._vertex_indices[vertex_index]
        return None

    def _vertex_or_raise(self, vertex_index: int) -> int:
        led_index = self._vertex_led_index(vertex_index)
        if led_index is None:
            raise LedLookupError(f"Vertex with index {vertex_index} does not exist.")
        return led_index

    # ------------------------------------------------------------------
    # Index-based access

    def get(self, index: int) -> Optional[Led]:
        return self._leds[index] if self._has_index(index) else None

    def set(self, index: int, color: Any) -> None:
        if not self._has_index(index):
            raise LedLookupError(f"LED at index {index} does not exist.")
        self._leds[index].color = color

    def modulate(self, index: int, rule: ColorRule) -> None:
        if not self._has_index(index):
            raise LedLookupError(f"LED at index {index} does not exist.")
        led = self._leds[index]
        led.color = rule(led)

    def set_all(self, color: Any) -> None:
        self._assign(range(len(self._leds)), color)

    def for_each(self, func: Callable[[Led], None]) -> None:
        for led in self._leds:
            func(led)

    # ------------------------------------------------------------------
    # Index ranges, half-open like ``range(start, stop)``

    def get_range(self, start: int, stop: int) -> List[Led]:
        self._check_range(start, stop, len(self._leds), "LED")
        return self._leds[start:stop]

    def range(self, start: int, stop: int) -> Filter:
        self._check_range(start, stop, len(self._leds), "LED")
        return Filter.from_range(start, stop)

    def set_range(self, start: int, stop: int, color: Any) -> None:
        self._check_range(start, stop, len(self._leds), "LED")
        self._assign(range(start, stop), color)

    def modulate_range(self, start: int, stop: int, rule: ColorRule) -> None:
        self._check_range(start, stop, len(self._leds), "LED")
        self._modulate(range(start, stop), rule)

    def for_each_in_range(self, start: int, stop: int, func: Callable[[Led], None]) -> None:
        self._check_range(start, stop, len(self._leds), "LED")
        for led in self._leds[start:stop]:
            func(led)

    # ------------------------------------------------------------------
    # Segments

    def get_segment(self, segment_index: int) -> Optional[List[Led]]:
        bounds = self._segment_bounds(segment_index)
        if bounds is None:
            return None
        return self._leds[bounds[0]:bounds[1]]

    def segment(self, segment_index: int) -> Optional[Filter]:
        bounds = self._segment_bounds(segment_index)
        if bounds is None:
            return None
        return Filter.from_range(*bounds)

    def set_segment(self, segment_index: int, color: Any) -> None:
        start, end = self._segment_or_raise(segment_index)
        self._assign(range(start, end), color)

    def modulate_segment(self, segment_index: int, rule: ColorRule) -> None:
        start, end = self._segment_or_raise(segment_index)
        self._modulate(range(start, end), rule)

    def for_each_in_segment(self, segment_index: int, func: Callable[[Led, float], None]) -> None:
        """Call ``func(led, alpha)`` for each LED of the segment.

        ``alpha`` runs from 0 at the first LED towards 1, never reaching it.
        """

        start, end = self._segment_or_raise(segment_index)
        count = float(end - start)
        for index in range(start, end):
            func(self._leds[index], (index - start) / count)

    def _segments_span(self, start: int, stop: int) -> Tuple[int, int]:
        self._check_range(start, stop, len(self._endpoints), "segment")
        if start == stop:
            return 0, 0
        return self._endpoints[start][0], self._endpoints[stop - 1][1]

    def segments(self, start: int, stop: int) -> Filter:
        """Every LED of segments ``start`` up to, not including, ``stop``."""

        return Filter.from_range(*self._segments_span(start, stop))

    def set_segments(self, start: int, stop: int, color: Any) -> None:
        led_start, led_stop = self._segments_span(start, stop)
        self._assign(range(led_start, led_stop), color)

    def modulate_segments(self, start: int, stop: int, rule: ColorRule) -> None:
        led_start, led_stop = self._segments_span(start, stop)
        self._modulate(range(led_start, led_stop), rule)

    # ------------------------------------------------------------------
    # Vertices

    def get_vertex(self, vertex_index: int) -> Optional[Led]:
        led_index = self._vertex_led_index(vertex_index)
        return None if led_index is None else self._leds[led_index]

    def get_vertices(self) -> List[Led]:
        return [self._leds[i] for i in self._vertex_indices]

    def vertices(self) -> Filter:
        return Filter.from_indices(self._vertex_indices)

    def set_vertex(self, vertex_index: int, color: Any) -> None:
        self._leds[self._vertex_or_raise(vertex_index)].color = color

    def modulate_vertex(self, vertex_index: int, rule: ColorRule) -> None:
        led = self._leds[self._vertex_or_raise(vertex_index)]
        led.color = rule(led)

    def set_vertices(self, color: Any) -> None:
        self._assign(self._vertex_indices, color)

    def modulate_vertices(self, rule: ColorRule) -> None:
        self._modulate(self._vertex_indices, rule)

    def for_each_vertex(self, func: Callable[[Led], None]) -> None:
        for i in self._vertex_indices:
            func(self._leds[i])

    # ------------------------------------------------------------------
    # Directions and angles

    def raycast(self, direction: Vector2D, origin: Optional[Sequence[float]] = None) -> Optional[RayHit]:
        """Where a ray from ``origin`` (default: the center point) meets the layout.

        The first segment in declaration order that the ray crosses is used,
        not necessarily the nearest one. Returns ``None`` on a miss.
        """

        start = self._center_point if origin is None else _check_point(origin)
        return queries.raycast(self._line_segments, self._endpoints, start, direction)

    def get_at_dir_from(self, origin: Sequence[float], direction: Vector2D) -> Optional[Led]:
        hit = self.raycast(direction, origin)
        return None if hit is None else self._leds[hit.index]

    def get_at_dir(self, direction: Vector2D) -> Optional[Led]:
        return self.get_at_dir_from(self._center_point, direction)

    def get_at_angle_from(self, origin: Sequence[float], angle: float) -> Optional[Led]:
        return self.get_at_dir_from(origin, from_angle(angle))

    def get_at_angle(self, angle: float) -> Optional[Led]:
        return self.get_at_dir_from(self._center_point, from_angle(angle))

    def _hit_or_raise(self, origin: Sequence[float], direction: Vector2D) -> RayHit:
        hit = self.raycast(direction, origin)
        if hit is None:
            raise LedLookupError(f"No LED in direction {tuple(direction)} from {tuple(origin)}.")
        return hit

    def set_at_dir_from(self, origin: Sequence[float], direction: Vector2D, color: Any) -> None:
        self._leds[self._hit_or_raise(origin, direction).index].color = color

    def set_at_dir(self, direction: Vector2D, color: Any) -> None:
        self.set_at_dir_from(self._center_point, direction, color)

    def set_at_angle_from(self, origin: Sequence[float], angle: float, color: Any) -> None:
        self.set_at_dir_from(origin, from_angle(angle), color)

    def set_at_angle(self, angle: float, color: Any) -> None:
        self.set_at_dir_from(self._center_point, from_angle(angle), color)

    def modulate_at_dir(self, direction: Vector2D, rule: ColorRule) -> None:
        led = self._leds[self._hit_or_raise(self._center_point, direction).index]
        led.color = rule(led)

    def modulate_at_angle(self, angle: float, rule: ColorRule) -> None:
        self.modulate_at_dir(from_angle(angle), rule)

    def blend_at_dir(
        self, direction: Vector2D, color: Any, origin: Optional[Sequence[float]] = None
    ) -> Optional[RayHit]:
        """Blend ``color`` into the two LEDs bracketing the ray hit.

        The lower LED receives ``color`` with weight ``occupancy`` and the next
        LED of the same segment with weight ``1 - occupancy``. Returns the hit,
        or ``None`` (and changes nothing) on a miss.
        """

        hit = self.raycast(direction, origin)
        if hit is None:
            return None
        weights = [(hit.lower, hit.occupancy)]
        if hit.upper is not None:
            weights.append((hit.upper, 1.0 - hit.occupancy))
        for index, weight in weights:
            led = self._leds[index]
            led.color = led.color * (1.0 - weight) + color * weight
        return hit

    def blend_at_angle(
        self, angle: float, color: Any, origin: Optional[Sequence[float]] = None
    ) -> Optional[RayHit]:
        return self.blend_at_dir(from_angle(angle), color, origin)

    # ------------------------------------------------------------------
    # Positions and distances

    def index_of_closest_to(self, pos: Sequence[float]) -> int:
        return queries.closest_index(self._line_segments, self._endpoints, _check_point(pos))

    def get_closest_to(self, pos: Sequence[float]) -> Led:
        return self._leds[self.index_of_closest_to(pos)]

    def set_closest_to(self, pos: Sequence[float], color: Any) -> None:
        self._leds[self.index_of_closest_to(pos)].color = color

    def modulate_closest_to(self, pos: Sequence[float], rule: ColorRule) -> None:
        led = self._leds[self.index_of_closest_to(pos)]
        led.color = rule(led)

    def _exactly_at(self, pos: Point2D) -> Filter:
        hits = np.flatnonzero((self._positions == np.asarray(pos)).all(axis=1))
        return Filter.from_indices(int(i) for i in hits)

    def at_dist_from(self, pos: Sequence[float], dist: float) -> Filter:
        """LEDs where the circle of radius ``dist`` around ``pos`` crosses the layout."""

        point = _check_point(pos)
        radius = queries.check_radius(dist)
        if radius == 0.0:
            return self._exactly_at(point)
        return Filter.from_indices(
            queries.indices_at_distance(self._line_segments, self._endpoints, point, radius)
        )

    def at_dist(self, dist: float) -> Filter:
        return self.at_dist_from(self._center_point, dist)

    def within_dist_from(self, pos: Sequence[float], dist: float) -> Filter:
        """LEDs inside the disk of radius ``dist`` around ``pos``, boundary LEDs included.

        The entry and exit points on each segment are rounded to their nearest
        LED, so an LED just outside the disk can be selected. The result always
        contains ``at_dist_from(pos, dist)``.
        """

        point = _check_point(pos)
        radius = queries.check_radius(dist)
        if radius == 0.0:
            return self._exactly_at(point)
        return Filter.from_indices(
            queries.indices_within_distance(self._line_segments, self._endpoints, point, radius)
        )

    def within_dist(self, dist: float) -> Filter:
        return self.within_dist_from(self._center_point, dist)

    def get_at_dist_from(self, pos: Sequence[float], dist: float) -> List[Led]:
        return self.get_filter(self.at_dist_from(pos, dist))

    def get_within_dist_from(self, pos: Sequence[float], dist: float) -> List[Led]:
        return self.get_filter(self.within_dist_from(pos, dist))

    def set_at_dist_from(self, pos: Sequence[float], dist: float, color: Any) -> None:
        selection = self.at_dist_from(pos, dist)
        if not selection:
            raise LedLookupError(f"No LEDs exist at a distance of {dist} from {tuple(pos)}.")
        self._assign(selection, color)

    def set_at_dist(self, dist: float, color: Any) -> None:
        self.set_at_dist_from(self._center_point, dist, color)

    def set_within_dist_from(self, pos: Sequence[float], dist: float, color: Any) -> None:
        selection = self.within_dist_from(pos, dist)
        if not selection:
            raise LedLookupError(f"No LEDs exist within a distance of {dist} from {tuple(pos)}.")
        self._assign(selection, color)

    def set_within_dist(self, dist: float, color: Any) -> None:
        self.set_within_dist_from(self._center_point, dist, color)

    def modulate_within_dist_from(self, pos: Sequence[float], dist: float, rule: ColorRule) -> None:
        selection = self.within_dist_from(pos, dist)
        if not selection:
            raise LedLookupError(f"No LEDs exist within a distance of {dist} from {tuple(pos)}.")
        self._modulate(selection, rule)

    # ------------------------------------------------------------------
    # Filters

    def filter(self, predicate: Callable[[Led], bool]) -> Filter:
        return Filter.from_indices(led.index for led in self._leds if predicate(led))

    def filter_by_angle(self, predicate: Callable[[float], bool]) -> Filter:
        return self.filter(lambda led: predicate(led.angle))

    def filter_by_dir(self, predicate: Callable[[Vector2D], bool]) -> Filter:
        return self.filter(lambda led: predicate(led.direction))

    def filter_by_pos(self, predicate: Callable[[Point2D], bool]) -> Filter:
        return self.filter(lambda led: predicate(led.position))

    def filter_by_dist(self, predicate: Callable[[float], bool]) -> Filter:
        return self.filter(lambda led: predicate(led.distance))

    def filter_by_dist_from(self, pos: Sequence[float], predicate: Callable[[float], bool]) -> Filter:
        point = _check_point(pos)
        dists = np.hypot(self._positions[:, 0] - point[0], self._positions[:, 1] - point[1])
        return Filter.from_indices(i for i, d in enumerate(dists.tolist()) if predicate(d))

    def angle_range(self, min_angle: float, max_angle: float) -> Filter:
        """LEDs whose angle lies on the counter-clockwise arc from ``min_angle`` to ``max_angle``.

        Angles are in radians and may be negative or exceed a full turn; the
        arc wraps around zero when needed.
        """

        if not (math.isfinite(min_angle) and math.isfinite(max_angle)):
            raise ValidationError("angle bounds must be finite")
        span = max_angle - min_angle
        if span < 0.0:
            raise ValidationError(f"angle range {min_angle}..{max_angle} is inverted")
        if span >= math.tau:
            return Filter.from_range(0, len(self._leds))

        lo = min_angle % math.tau
        hi = lo + span
        angles = self._sorted_angles
        first = int(np.searchsorted(angles, lo, side="left"))
        if hi < math.tau:
            last = int(np.searchsorted(angles, hi, side="right"))
            picked = self._angle_order[first:last]
        else:
            wrapped = int(np.searchsorted(angles, hi - math.tau, side="right"))
            picked = np.concatenate((self._angle_order[first:], self._angle_order[:wrapped]))
        return Filter.from_indices(int(i) for i in picked)

    def get_filter(self, selection: Filter) -> List[Led]:
        self._check_filter(selection)
        return [self._leds[i] for i in selection]

    def set_filter(self, selection: Filter, color: Any) -> None:
        self._check_filter(selection)
        self._assign(selection, color)

    def modulate_filter(self, selection: Filter, rule: ColorRule) -> None:
        self._check_filter(selection)
        self._modulate(selection, rule)

    def for_each_in_filter(self, selection: Filter, func: Callable[[Led], None]) -> None:
        self._check_filter(selection)
        for i in selection:
            func(self._leds[i])

    # ------------------------------------------------------------------
    # Maps

    def map(self, rule: ColorRule) -> None:
        self._modulate(range(len(self._leds)), rule)

    def map_by_index(self, rule: Callable[[int], Any]) -> None:
        self.map(lambda led: rule(led.index))

    def map_by_segment(self, rule: Callable[[int], Any]) -> None:
        self.map(lambda led: rule(led.segment))

    def map_by_pos(self, rule: Callable[[Point2D], Any]) -> None:
        self.map(lambda led: rule(led.position))

    def map_by_dir(self, rule: Callable[[Vector2D], Any]) -> None:
        self.map(lambda led: rule(led.direction))

    def map_by_angle(self, rule: Callable[[float], Any]) -> None:
        self.map(lambda led: rule(led.angle))

    def map_by_dist(self, rule: Callable[[float], Any]) -> None:
        self.map(lambda led: rule(led.distance))

    def map_by_dist_from(self, pos: Sequence[float], rule: Callable[[float], Any]) -> None:
        point = _check_point(pos)
        dists = np.hypot(self._positions[:, 0] - point[0], self._positions[:, 1] - point[1]).tolist()
        self.map(lambda led: rule(dists[led.index]))

    def __len__(self) -> int:
        return len(self._leds)

    def __repr__(self) -> str:
        return (
            f"Sled(leds={len(self._leds)}, segments={len(self._line_segments)}, "
            f"vertices={len(self._vertex_indices)}, center={self._center_point})"
        )


__all__ = ["Sled", "ColorRule"]
