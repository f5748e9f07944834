from typing import List, Optional

from .config import LayoutConfig, SegmentSpec
from .geometry import Point2D


def number_str(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def point_str(p: Point2D) -> str:
    return f"({number_str(p[0])}, {number_str(p[1])})"


def _format_opts(density: Optional[float]) -> str:
    if density is None:
        return ""
    return f" [density={number_str(density)}]"


def _chains(segments: List[SegmentSpec]) -> List[List[SegmentSpec]]:
    chains: List[List[SegmentSpec]] = []
    for seg in segments:
        if chains:
            last = chains[-1][-1]
            if last.end == seg.start and last.density == seg.density:
                chains[-1].append(seg)
                continue
        chains.append([seg])
    return chains


def format_layout(config: LayoutConfig) -> str:
    """Render ``config`` in the canonical text form accepted by ``parse_layout``.

    Runs of connected segments with the same density collapse into a single
    ``polyline`` statement.
    """

    lines = [
        f"center {point_str(config.center_point)}",
        f"density {number_str(config.density)}",
    ]
    for chain in _chains(config.segments):
        points = [chain[0].start] + [seg.end for seg in chain]
        keyword = "segment" if len(chain) == 1 else "polyline"
        body = " -> ".join(point_str(p) for p in points)
        lines.append(f"{keyword} {body}{_format_opts(chain[0].density)}")
    return "\n".join(lines) + "\n"


__all__ = ["format_layout", "number_str", "point_str"]
