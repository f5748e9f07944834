"""Layout configuration objects and loaders."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from .geometry import LineSegment, Point2D, as_point

logger = logging.getLogger(__name__)


@dataclass
class SegmentSpec:
    start: Point2D
    end: Point2D
    density: Optional[float] = None


@dataclass
class LayoutConfig:
    """Parsed description of a room layout.

    ``density`` is the layout-wide default applied to every segment that does
    not carry its own.
    """

    center_point: Point2D
    density: float
    segments: List[SegmentSpec] = field(default_factory=list)

    def resolve_segments(self) -> List[LineSegment]:
        default = float(self.density)
        return [
            LineSegment(
                start=as_point(seg.start),
                end=as_point(seg.end),
                density=default if seg.density is None else float(seg.density),
            )
            for seg in self.segments
        ]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LayoutConfig":
        """Build a config from the TOML-shaped mapping.

        Expected keys: ``center_point``, ``density`` and a ``line_segment``
        array of tables with ``start``, ``end`` and an optional ``density``.
        """

        if "center_point" not in data:
            raise ValueError("layout is missing 'center_point'")
        if "density" not in data:
            raise ValueError("layout is missing 'density'")
        center = as_point(data["center_point"])
        density = float(data["density"])

        raw_segments = data.get("line_segment", [])
        if not isinstance(raw_segments, (list, tuple)):
            raise ValueError("'line_segment' must be an array of tables")
        segments: List[SegmentSpec] = []
        for idx, raw in enumerate(raw_segments):
            if not isinstance(raw, Mapping) or "start" not in raw or "end" not in raw:
                raise ValueError(f"line_segment[{idx}] needs 'start' and 'end'")
            seg_density = raw.get("density")
            segments.append(
                SegmentSpec(
                    start=as_point(raw["start"]),
                    end=as_point(raw["end"]),
                    density=None if seg_density is None else float(seg_density),
                )
            )
        return cls(center_point=center, density=density, segments=segments)


def load_layout(path: Union[str, Path]) -> LayoutConfig:
    """Read a layout from ``path``; ``.toml`` files use TOML, anything else the text format."""

    path = Path(path)
    logger.info("Loading layout from %s", path)
    if path.suffix.lower() == ".toml":
        with path.open("rb") as fin:
            data = tomllib.load(fin)
        return LayoutConfig.from_mapping(data)

    from .parser import parse_layout

    return parse_layout(path.read_text(encoding="utf-8"))


__all__ = ["SegmentSpec", "LayoutConfig", "load_layout"]
