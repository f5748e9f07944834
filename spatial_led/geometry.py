"""Planar geometry primitives used by the layout builder and query engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Point2D = Tuple[float, float]
Vector2D = Tuple[float, float]

_DENOM_EPS = 1e-12
_PARAM_EPS = 1e-9


def _vec2(a: Point2D, b: Point2D) -> Vector2D:
    return b[0] - a[0], b[1] - a[1]


def _dot2(a: Vector2D, b: Vector2D) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _cross2(a: Vector2D, b: Vector2D) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _norm_sq2(v: Vector2D) -> float:
    return _dot2(v, v)


def _norm2(v: Vector2D) -> float:
    return math.sqrt(max(_norm_sq2(v), 0.0))


def as_point(value: Sequence[float]) -> Point2D:
    """Coerce a length-2 sequence into a ``(x, y)`` float tuple."""

    if len(value) != 2:
        raise ValueError(f"coordinate must be length-2, got {value!r}")
    return float(value[0]), float(value[1])


def is_finite_point(p: Point2D) -> bool:
    return math.isfinite(p[0]) and math.isfinite(p[1])


def distance_sq(a: Point2D, b: Point2D) -> float:
    return _norm_sq2(_vec2(a, b))


def distance(a: Point2D, b: Point2D) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def lerp(a: Point2D, b: Point2D, t: float) -> Point2D:
    # exact at both ends
    s = 1.0 - t
    return a[0] * s + b[0] * t, a[1] * s + b[1] * t


def inverse_lerp(a: Point2D, b: Point2D, c: Point2D) -> float:
    """If ``lerp(a, b, t) == c`` return ``t``.

    The axis with the larger extent is used so near-axis-aligned segments do
    not divide by a vanishing span.
    """

    dx = b[0] - a[0]
    dy = b[1] - a[1]
    if abs(dx) >= abs(dy):
        if abs(dx) <= _DENOM_EPS:
            return 0.0
        return (c[0] - a[0]) / dx
    return (c[1] - a[1]) / dy


def from_angle(theta: float) -> Vector2D:
    return math.cos(theta), math.sin(theta)


def normalize(v: Vector2D) -> Vector2D:
    """Return ``v`` scaled to unit length; raise ``ValueError`` for a zero vector."""

    norm = _norm2(v)
    if norm <= _DENOM_EPS or not math.isfinite(norm):
        raise ValueError(f"cannot normalize vector {v!r}")
    return v[0] / norm, v[1] / norm


def angle_of(v: Vector2D) -> float:
    """Angle of ``v`` in ``[0, 2*pi)``."""

    angle = math.atan2(v[1], v[0])
    if angle < 0.0:
        angle += math.tau
    return 0.0 if angle >= math.tau else angle


def _solve_quadratic(a: float, b: float, c: float) -> List[float]:
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return []
    if disc == 0.0:
        return [-b / (2.0 * a)]
    root = math.sqrt(disc)
    # avoids cancellation between -b and root
    q = -0.5 * (b + math.copysign(root, b))
    if q == 0.0:
        return [0.0]
    r1 = q / a
    r2 = c / q
    return sorted((r1, r2))


def _clamp_param(t: float) -> Optional[float]:
    if t < -_PARAM_EPS or t > 1.0 + _PARAM_EPS:
        return None
    return min(max(t, 0.0), 1.0)


@dataclass(frozen=True)
class LineSegment:
    """Straight run of LEDs from ``start`` to ``end`` at ``density`` LEDs per unit."""

    start: Point2D
    end: Point2D
    density: float

    @property
    def length(self) -> float:
        return distance(self.start, self.end)

    @property
    def num_leds(self) -> int:
        return max(1, int(math.floor(self.length * self.density + 0.5)))

    @property
    def direction(self) -> Vector2D:
        return _vec2(self.start, self.end)

    def point_at(self, t: float) -> Point2D:
        return lerp(self.start, self.end, t)

    def intersects_line(self, a: Point2D, b: Point2D) -> Optional[Point2D]:
        """Intersection point of this segment with the finite segment ``a``-``b``.

        Parallel and collinear inputs report no intersection.
        """

        d = self.direction
        e = _vec2(a, b)
        denom = _cross2(d, e)
        if abs(denom) <= _DENOM_EPS * max(_norm2(d) * _norm2(e), 1.0):
            return None
        diff = _vec2(self.start, a)
        t = _clamp_param(_cross2(diff, e) / denom)
        u = _clamp_param(_cross2(diff, d) / denom)
        if t is None or u is None:
            return None
        return self.point_at(t)

    def closest_to_point(self, p: Point2D) -> Tuple[Point2D, float]:
        """Closest point on the segment to ``p`` and its parameter along the segment."""

        d = self.direction
        denom = _norm_sq2(d)
        if denom <= _DENOM_EPS:
            return self.start, 0.0
        t = _dot2(_vec2(self.start, p), d) / denom
        t = min(max(t, 0.0), 1.0)
        return self.point_at(t), t

    def _circle_coefficients(self, center: Point2D, radius: float) -> Tuple[float, float, float]:
        d = self.direction
        f = _vec2(center, self.start)
        return _norm_sq2(d), 2.0 * _dot2(f, d), _norm_sq2(f) - radius * radius

    def intersects_circle(self, center: Point2D, radius: float) -> List[float]:
        """Parameters in ``[0, 1]`` where the segment crosses the circle outline."""

        a, b, c = self._circle_coefficients(center, radius)
        if a <= _DENOM_EPS:
            return []
        params: List[float] = []
        for root in _solve_quadratic(a, b, c):
            t = _clamp_param(root)
            if t is not None and t not in params:
                params.append(t)
        return params

    def intersects_solid_circle(self, center: Point2D, radius: float) -> List[float]:
        """Entry and exit parameters of the part of the segment inside the disk.

        Returns ``[]`` when the segment misses the disk, otherwise
        ``[t_in, t_out]`` with ``t_in <= t_out``; both are ``0``/``1`` when an
        endpoint already lies inside.
        """

        a, b, c = self._circle_coefficients(center, radius)
        if a <= _DENOM_EPS:
            return []
        roots = _solve_quadratic(a, b, c)
        if not roots:
            return []
        lo = max(roots[0], 0.0)
        hi = min(roots[-1], 1.0)
        if lo > hi:
            return []
        return [lo, hi]


__all__ = [
    "Point2D",
    "Vector2D",
    "LineSegment",
    "as_point",
    "angle_of",
    "distance",
    "distance_sq",
    "from_angle",
    "inverse_lerp",
    "is_finite_point",
    "lerp",
    "normalize",
]
