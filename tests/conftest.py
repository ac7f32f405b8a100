import numpy as np
import pytest

from maskframe.builder import MaskFrameBuilder
from maskframe.fonts import FontProvider


@pytest.fixture
def fonts():
    # sin directorios del sistema: los tests no dependen de fuentes instaladas
    return FontProvider(font_dirs=[])


@pytest.fixture
def default_font(fonts):
    return fonts.load("default")


@pytest.fixture
def builder():
    return MaskFrameBuilder()


def column_ramp(width, height):
    """Superficie 16 bits donde cada columna tiene un valor distinto"""
    values = (np.arange(width, dtype=np.uint32) * 97) % 65536
    return np.repeat(np.repeat(values[None, :, None], height, axis=0), 3, axis=2)
