import math
from typing import List

from .config import LayoutConfig
from .errors import ConstructionError
from .geometry import LineSegment, as_point, is_finite_point


def _check_density(value: float, where: str) -> None:
    if not math.isfinite(value):
        raise ConstructionError(f'{where} density must be finite, got {value!r}')
    if value < 0:
        raise ConstructionError(f'{where} density must be non-negative, got {value!r}')


def validate_layout(config: LayoutConfig) -> List[LineSegment]:
    """Check ``config`` and return its resolved line segments.

    Raises :class:`ConstructionError` describing the first problem found.
    """

    try:
        center = as_point(config.center_point)
        default_density = float(config.density)
    except (TypeError, ValueError) as exc:
        raise ConstructionError(f'invalid layout header: {exc}') from exc

    if not is_finite_point(center):
        raise ConstructionError(f'center point must be finite, got {center!r}')
    _check_density(default_density, 'default')
    if not config.segments:
        raise ConstructionError('layout needs at least one line segment')

    try:
        segments = config.resolve_segments()
    except (TypeError, ValueError) as exc:
        raise ConstructionError(f'invalid line segment: {exc}') from exc

    for idx, seg in enumerate(segments):
        if not (is_finite_point(seg.start) and is_finite_point(seg.end)):
            raise ConstructionError(f'segment {idx} has non-finite coordinates')
        _check_density(seg.density, f'segment {idx}')
        if seg.start == seg.end:
            raise ConstructionError(f'segment {idx} start and end must be distinct')
        if not math.isfinite(seg.length):
            raise ConstructionError(f'segment {idx} length overflows')
        if not math.isfinite(seg.length * seg.density):
            raise ConstructionError(f'segment {idx} LED count overflows')

    if sum(seg.num_leds for seg in segments) == 0:
        raise ConstructionError('layout produces zero LEDs')
    return segments


__all__ = ["validate_layout"]
