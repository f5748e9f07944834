from .color import BLACK, WHITE, Rgb
from .config import LayoutConfig, SegmentSpec, load_layout
from .data import Data
from .errors import (
    ConstructionError,
    DataKeyError,
    DataTypeError,
    LedLookupError,
    SledError,
    ValidationError,
)
from .filter import Filter
from .geometry import LineSegment, Point2D, Vector2D
from .led import Led
from .parser import parse_layout
from .printer import format_layout
from .queries import RayHit
from .sled import Sled
from .validate import validate_layout

__all__ = [
    'BLACK',
    'WHITE',
    'Rgb',
    'LayoutConfig',
    'SegmentSpec',
    'load_layout',
    'Data',
    'ConstructionError',
    'DataKeyError',
    'DataTypeError',
    'LedLookupError',
    'SledError',
    'ValidationError',
    'Filter',
    'LineSegment',
    'Point2D',
    'Vector2D',
    'Led',
    'parse_layout',
    'format_layout',
    'RayHit',
    'Sled',
    'validate_layout',
]
