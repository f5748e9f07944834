import pytest

from spatial_led import LayoutConfig, SegmentSpec, Sled


@pytest.fixture
def corner_sled():
    # 10 LEDs per leg; vertices at LEDs 0, 9 and 19
    segments = [SegmentSpec((0.0, 0.0), (10.0, 0.0)), SegmentSpec((10.0, 0.0), (10.0, 10.0))]
    return Sled(LayoutConfig(center_point=(5.0, 5.0), density=1.0, segments=segments))


@pytest.fixture
def wall_sled():
    # 11 LEDs at integer y from -5 to 5 on the line x = 10
    segments = [SegmentSpec((10.0, -5.0), (10.0, 5.0))]
    return Sled(LayoutConfig(center_point=(0.0, 0.0), density=1.1, segments=segments))


@pytest.fixture
def strip_sled():
    # 11 LEDs at integer x from 0 to 10 on the line y = 0
    segments = [SegmentSpec((0.0, 0.0), (10.0, 0.0))]
    return Sled(LayoutConfig(center_point=(5.0, 5.0), density=1.1, segments=segments))
