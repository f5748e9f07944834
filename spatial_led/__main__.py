import argparse
import logging
import math
import sys
from typing import List, Optional, Sequence, Tuple

from spatial_led import (
    ConstructionError,
    Filter,
    Sled,
    ValidationError,
    format_layout,
    load_layout,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_pair(value: str) -> Tuple[float, float]:
    parts = [part.strip() for part in value.split(",") if part.strip()]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {value!r}")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected X,Y but got {value!r}") from exc


def _format_point(p: Tuple[float, float]) -> str:
    return f"({p[0]:.4f}, {p[1]:.4f})"


def _format_filter(selection: Filter) -> str:
    if not selection:
        return "(none)"
    return ", ".join(str(i) for i in selection)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect an LED layout and run spatial queries")
    parser.add_argument("path", help="Path to a layout file (.toml or text format)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--angle",
        type=float,
        action="append",
        default=[],
        help="Report the LED hit at this angle in degrees from the center (repeatable)",
    )
    parser.add_argument(
        "--dir",
        type=_parse_pair,
        action="append",
        default=[],
        help="Report the LED hit in direction X,Y from the center (repeatable)",
    )
    parser.add_argument(
        "--closest",
        type=_parse_pair,
        action="append",
        default=[],
        help="Report the LED closest to the point X,Y (repeatable)",
    )
    parser.add_argument(
        "--at",
        type=float,
        help="List LEDs at exactly this distance from the center",
    )
    parser.add_argument(
        "--within",
        type=float,
        help="List LEDs within this distance of the center",
    )
    parser.add_argument(
        "--print-layout",
        action="store_true",
        help="Print the layout in canonical text form",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        config = load_layout(args.path)
        sled = Sled(config)
    except (OSError, SyntaxError, ValueError, ConstructionError) as exc:
        logger.error("Failed to load layout %s: %s", args.path, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.print_layout:
        print(format_layout(config), end="")

    lo, hi = sled.domain
    print(f"LEDs: {sled.num_leds}")
    print(f"Segments: {sled.num_segments}")
    print(f"Vertices: {sled.num_vertices}")
    print(f"Center: {_format_point(sled.center_point)}")
    print(f"Domain: {_format_point(lo)} .. {_format_point(hi)}")

    queries: List[Tuple[str, Tuple[float, float]]] = []
    for degrees in args.angle:
        rad = math.radians(degrees)
        queries.append((f"angle {degrees:g}", (math.cos(rad), math.sin(rad))))
    for direction in args.dir:
        queries.append((f"dir {direction[0]:g},{direction[1]:g}", direction))

    try:
        for label, direction in queries:
            hit = sled.raycast(direction)
            if hit is None:
                print(f"{label}: miss")
                continue
            print(
                f"{label}: led {hit.index} segment {hit.segment} "
                f"at {_format_point(hit.point)} occupancy {hit.occupancy:.3f}"
            )

        for point in args.closest:
            led = sled.get_closest_to(point)
            print(f"closest {point[0]:g},{point[1]:g}: led {led.index} at {_format_point(led.position)}")

        if args.at is not None:
            print(f"at {args.at:g}: {_format_filter(sled.at_dist(args.at))}")
        if args.within is not None:
            print(f"within {args.within:g}: {_format_filter(sled.within_dist(args.within))}")
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
