"""Directional and positional query engine.

Every function here is pure: it reads the segment list and the segment
endpoint table of a layout and answers with LED indices. The spatial index
turns those indices into LEDs or mutations.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import ValidationError
from .geometry import LineSegment, Point2D, Vector2D, distance, distance_sq, inverse_lerp, normalize
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

EndpointTable = Sequence[Tuple[int, int]]

_SNAP_EPS = 1e-6


@dataclass(frozen=True)
class RayHit:
    """Where a ray struck the layout.

    ``fractional_index`` lies between LED ``lower`` and ``lower + 1``;
    ``occupancy`` is the share of the hit that belongs to ``lower``.
    """

    segment: int
    alpha: float
    point: Point2D
    fractional_index: float
    index: int
    lower: int
    upper: Optional[int]
    occupancy: float


def fractional_index(alpha: float, segment_index: int, endpoints: EndpointTable) -> float:
    """Map a parameter along a segment onto the flat LED buffer."""

    start, end = endpoints[segment_index]
    value = start + alpha * (end - start - 1)
    nearest = math.floor(value + 0.5)
    if abs(value - nearest) < _SNAP_EPS:
        return float(nearest)
    return value


def _clamp_to_segment(index: int, segment_index: int, endpoints: EndpointTable) -> int:
    start, end = endpoints[segment_index]
    return min(max(index, start), end - 1)


def alpha_to_index(alpha: float, segment_index: int, endpoints: EndpointTable) -> int:
    value = fractional_index(alpha, segment_index, endpoints)
    return _clamp_to_segment(math.floor(value + 0.5), segment_index, endpoints)


def ray_reach(origin: Point2D, segments: Sequence[LineSegment]) -> float:
    """A ray length long enough to cross every segment from ``origin``."""

    farthest = max(
        max(distance(origin, seg.start), distance(origin, seg.end)) for seg in segments
    )
    return 2.0 * farthest + 1.0


def check_direction(direction: Vector2D) -> Vector2D:
    try:
        dx, dy = float(direction[0]), float(direction[1])
        return normalize((dx, dy))
    except (TypeError, ValueError, IndexError) as exc:
        raise ValidationError(f"invalid direction {direction!r}") from exc


def raycast(
    segments: Sequence[LineSegment],
    endpoints: EndpointTable,
    origin: Point2D,
    direction: Vector2D,
) -> Optional[RayHit]:
    """Cast a ray and report the LED it strikes on the first segment it crosses.

    Segments are tried in declaration order and the first one crossed wins,
    even if a later segment is closer to ``origin``.
    """

    unit = check_direction(direction)
    reach = ray_reach(origin, segments)
    ray_end = (origin[0] + unit[0] * reach, origin[1] + unit[1] * reach)

    for segment_index, seg in enumerate(segments):
        point = seg.intersects_line(origin, ray_end)
        if point is None:
            continue
        alpha = min(max(inverse_lerp(seg.start, seg.end, point), 0.0), 1.0)
        value = fractional_index(alpha, segment_index, endpoints)
        lower = _clamp_to_segment(math.floor(value), segment_index, endpoints)
        occupancy = 1.0 - (value - lower)
        upper = lower + 1 if lower + 1 < endpoints[segment_index][1] else None
        return RayHit(
            segment=segment_index,
            alpha=alpha,
            point=point,
            fractional_index=value,
            index=alpha_to_index(alpha, segment_index, endpoints),
            lower=lower,
            upper=upper,
            occupancy=min(max(occupancy, 0.0), 1.0),
        )
    return None


def closest_index(
    segments: Sequence[LineSegment], endpoints: EndpointTable, pos: Point2D
) -> int:
    """Index of the LED nearest to ``pos``; ties go to the earliest segment."""

    best: Optional[Tuple[float, float, int]] = None
    for segment_index, seg in enumerate(segments):
        closest, alpha = seg.closest_to_point(pos)
        dist_sq = distance_sq(closest, pos)
        if best is None or dist_sq < best[0]:
            best = (dist_sq, alpha, segment_index)
    if best is None:
        raise ValidationError("cannot find the closest LED of a layout without line segments")
    _, alpha, segment_index = best
    return alpha_to_index(alpha, segment_index, endpoints)


def check_radius(radius: float) -> float:
    radius = float(radius)
    if not math.isfinite(radius) or radius < 0.0:
        raise ValidationError(f"distance must be finite and non-negative, got {radius!r}")
    return radius


def indices_at_distance(
    segments: Sequence[LineSegment], endpoints: EndpointTable, pos: Point2D, radius: float
) -> List[int]:
    """LEDs nearest to each crossing of the circle of ``radius`` around ``pos``."""

    indices: List[int] = []
    for segment_index, seg in enumerate(segments):
        for alpha in seg.intersects_circle(pos, radius):
            indices.append(alpha_to_index(alpha, segment_index, endpoints))
    return indices


def indices_within_distance(
    segments: Sequence[LineSegment], endpoints: EndpointTable, pos: Point2D, radius: float
) -> List[int]:
    """LEDs of every segment portion inside the disk of ``radius`` around ``pos``."""

    indices: List[int] = []
    for segment_index, seg in enumerate(segments):
        params = seg.intersects_solid_circle(pos, radius)
        if len(params) != 2:
            continue
        first = alpha_to_index(params[0], segment_index, endpoints)
        second = alpha_to_index(params[1], segment_index, endpoints)
        indices.extend(range(min(first, second), max(first, second) + 1))
    return indices


__all__ = [
    "RayHit",
    "alpha_to_index",
    "check_direction",
    "check_radius",
    "closest_index",
    "fractional_index",
    "indices_at_distance",
    "indices_within_distance",
    "ray_reach",
    "raycast",
]

apply_debug_logging(globals(), logger=logger)
