from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .geometry import Point2D, Vector2D


@dataclass
class Led:
    """A single light in the layout.

    Everything except ``color`` is fixed when the layout is built; ``angle``
    and ``distance`` are measured from the layout's center point.
    """

    index: int
    segment: int
    position: Point2D
    direction: Vector2D
    angle: float
    distance: float
    color: Any

    def __repr__(self) -> str:
        x, y = self.position
        return f"Led(index={self.index}, segment={self.segment}, position=({x:.3f}, {y:.3f}), color={self.color!r})"


__all__ = ["Led"]
