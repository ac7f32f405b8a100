import numpy as np
import pytest
from PIL import Image

from maskframe.errors import InvalidGeometry
from maskframe.geometry import GeometryNormalizer
from maskframe.surface import ArraySurface, ImageSurface

from conftest import column_ramp


def test_matching_aspect_is_not_cropped():
    n = GeometryNormalizer()
    assert n.crop_box(80, 24) == (0, 0, 80, 24)
    out = n.normalize(ArraySurface(column_ramp(80, 24)))
    assert out.size == (40, 12)


def test_matching_aspect_scales_proportionally():
    n = GeometryNormalizer()
    # 30/9 == 40/12
    assert n.crop_box(30, 9) == (0, 0, 30, 9)
    assert n.normalize(ArraySurface(column_ramp(30, 9))).size == (40, 12)


def test_wide_image_is_cropped_centered():
    n = GeometryNormalizer()
    assert n.crop_box(100, 12) == (30, 0, 70, 12)

    src = column_ramp(100, 12)
    out = n.normalize(ArraySurface(src))
    assert out.size == (40, 12)
    assert np.array_equal(out.rgb16(), src[:, 30:70])


def test_wide_crop_width_is_rounded():
    n = GeometryNormalizer()
    # 14 * 40 / 12 = 46.67 -> 47, offset (100 - 47) // 2 = 26
    assert n.crop_box(100, 14) == (26, 0, 73, 14)


def test_tall_image_is_cropped_centered():
    n = GeometryNormalizer()
    assert n.crop_box(40, 30) == (0, 9, 40, 21)

    src = np.zeros((30, 40, 3), dtype=np.uint32)
    src[9:21] = 65535
    out = n.normalize(ArraySurface(src))
    assert out.size == (40, 12)
    assert (out.rgb16() == 65535).all()


def test_pil_image_is_cropped_and_resized():
    img = Image.new("RGB", (200, 30), (0, 0, 0))
    # solo el centro (50..150) es blanco
    img.paste((255, 255, 255), (50, 0, 150, 30))
    out = GeometryNormalizer().normalize(ImageSurface(img))
    assert out.size == (40, 12)
    assert (out.rgb16() == 65535).all()


def test_normalized_image_is_unchanged():
    rng = np.random.default_rng(1)
    src = rng.integers(0, 65536, size=(12, 40, 3))
    out = GeometryNormalizer().normalize(ArraySurface(src))
    assert np.array_equal(out.rgb16(), src)

    img = Image.fromarray(rng.integers(0, 256, size=(12, 40, 3), dtype=np.uint8))
    out = GeometryNormalizer().normalize(ImageSurface(img))
    assert out.to_image().tobytes() == img.tobytes()


@pytest.mark.parametrize("size", [(0, 12), (40, 0), (0, 0)])
def test_empty_image_is_invalid(size):
    with pytest.raises(InvalidGeometry):
        GeometryNormalizer().normalize(ImageSurface(Image.new("RGB", size)))


def test_negative_size_is_invalid():
    with pytest.raises(InvalidGeometry):
        GeometryNormalizer().crop_box(-4, 12)


def test_sliver_that_crops_to_nothing_is_invalid():
    # 1 px de ancho y 100 de alto: el recorte dejaría 0 filas
    with pytest.raises(InvalidGeometry):
        GeometryNormalizer().crop_box(1, 100)
