import numpy as np
import pytest
from PIL import Image

from maskframe.color import SampledColorEncoder, SolidColorEncoder
from maskframe.errors import InvalidGeometry
from maskframe.surface import ArraySurface, ImageSurface


def test_solid_white_for_three_columns():
    assert SolidColorEncoder().encode(3) == bytes.fromhex("FF FF FF FF FF FF FF FF FF")


def test_solid_zero_columns():
    assert SolidColorEncoder().encode(0) == b""


def test_solid_custom_color():
    assert SolidColorEncoder((1, 2, 3)).encode(2) == b"\x01\x02\x03\x01\x02\x03"


def test_solid_rejects_bad_color():
    with pytest.raises(ValueError):
        SolidColorEncoder((0, 0, 300))


def test_sampled_truncates_16_bit_channels():
    px = np.array([[[65535, 256, 255]]], dtype=np.uint32)
    assert SampledColorEncoder(rows=1).encode(1, ArraySurface(px)) == bytes([255, 1, 0])


def test_sampled_is_column_major():
    px = np.zeros((2, 2, 3), dtype=np.uint32)
    px[0, 0] = 1 << 8  # x=0, y=0
    px[1, 0] = 2 << 8  # x=0, y=1
    px[0, 1] = 3 << 8  # x=1, y=0
    px[1, 1] = 4 << 8  # x=1, y=1
    data = SampledColorEncoder(rows=2).encode(2, ArraySurface(px))
    assert data == bytes([1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 4, 4])


def test_sampled_8_bit_image_round_trips_bytes():
    img = Image.new("RGB", (40, 12), (12, 200, 255))
    data = SampledColorEncoder().encode(40, ImageSurface(img))
    assert len(data) == 40 * 12 * 3
    assert data[:3] == bytes([12, 200, 255])


def test_sampled_needs_a_surface():
    with pytest.raises(ValueError):
        SampledColorEncoder().encode(3)


def test_sampled_needs_enough_rows():
    px = np.zeros((4, 5, 3), dtype=np.uint32)
    with pytest.raises(InvalidGeometry):
        SampledColorEncoder(rows=12).encode(5, ArraySurface(px))


def test_sampled_rejects_negative_columns():
    px = np.zeros((12, 5, 3), dtype=np.uint32)
    with pytest.raises(InvalidGeometry):
        SampledColorEncoder().encode(-2, ArraySurface(px))
