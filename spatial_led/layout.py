"""Turns a validated list of line segments into the LED buffer and lookup tables."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

import numpy as np

from .config import LayoutConfig
from .geometry import LineSegment, Point2D, angle_of, as_point, normalize
from .led import Led
from .validate import validate_layout

logger = logging.getLogger(__name__)


@dataclass
class Layout:
    center_point: Point2D
    leds: List[Led]
    line_segments: List[LineSegment]
    segment_endpoint_indices: List[Tuple[int, int]]
    vertex_indices: List[int]
    angle_order: np.ndarray
    sorted_angles: np.ndarray


def leds_per_segment(segments: Sequence[LineSegment]) -> List[int]:
    return [seg.num_leds for seg in segments]


def build_led_list(
    segments: Sequence[LineSegment],
    counts: Sequence[int],
    center: Point2D,
    default_color: Any,
) -> List[Led]:
    leds: List[Led] = []
    for segment_index, (seg, count) in enumerate(zip(segments, counts)):
        # linspace(0, 1, 1) == [0.0], so single-LED segments sit on their start
        for t in np.linspace(0.0, 1.0, count):
            pos = seg.point_at(float(t))
            offset = (pos[0] - center[0], pos[1] - center[1])
            try:
                direction = normalize(offset)
            except ValueError:
                logger.warning(
                    "LED %d sits on the center point %s; using a zero direction", len(leds), center
                )
                direction = (0.0, 0.0)
            leds.append(
                Led(
                    index=len(leds),
                    segment=segment_index,
                    position=pos,
                    direction=direction,
                    angle=angle_of(direction),
                    distance=math.hypot(*offset),
                    color=default_color,
                )
            )
    return leds


def segment_endpoint_indices(counts: Sequence[int]) -> List[Tuple[int, int]]:
    table: List[Tuple[int, int]] = []
    last_index = 0
    for count in counts:
        table.append((last_index, last_index + count))
        last_index += count
    return table


def vertex_indices(segments: Sequence[LineSegment], counts: Sequence[int]) -> List[int]:
    """Indices of LEDs at segment endpoints, sharing one vertex where segments touch."""

    vertices: List[int] = []
    last_end = None
    last_index = 0
    for seg, count in zip(segments, counts):
        if seg.start != last_end:
            vertices.append(last_index)
        end_index = last_index + count - 1
        # a one-LED segment's start and end are the same LED
        if not vertices or vertices[-1] != end_index:
            vertices.append(end_index)
        last_index += count
        last_end = seg.end
    return vertices


def build_layout(config: LayoutConfig, default_color: Any) -> Layout:
    """Validate ``config`` and compute every table the spatial index needs.

    Raises :class:`~spatial_led.errors.ConstructionError` on an invalid layout;
    nothing is returned partially built.
    """

    segments = validate_layout(config)
    center = as_point(config.center_point)
    counts = leds_per_segment(segments)
    leds = build_led_list(segments, counts, center, default_color)

    angles = np.fromiter((led.angle for led in leds), dtype=float, count=len(leds))
    order = np.argsort(angles, kind="stable")

    layout = Layout(
        center_point=center,
        leds=leds,
        line_segments=list(segments),
        segment_endpoint_indices=segment_endpoint_indices(counts),
        vertex_indices=vertex_indices(segments, counts),
        angle_order=order,
        sorted_angles=angles[order],
    )
    logger.info(
        "Built layout with %d LEDs across %d segments (%d vertices)",
        len(layout.leds),
        len(layout.line_segments),
        len(layout.vertex_indices),
    )
    return layout


__all__ = [
    "Layout",
    "build_layout",
    "build_led_list",
    "leds_per_segment",
    "segment_endpoint_indices",
    "vertex_indices",
]
