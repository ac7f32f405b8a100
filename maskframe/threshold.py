from __future__ import annotations
import logging
from typing import Optional

import numpy as np
from PIL import Image

from .config import LUMA_THRESHOLD
from .errors import InvalidGeometry
from .models import Bitmap
from .surface import Surface

logger = logging.getLogger(__name__)

# Pesos BT.601 sobre canales de 16 bits
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def luma16(rgb: np.ndarray) -> np.ndarray:
    """HxWx3 (0..65535) -> HxW luma en float64"""
    r = rgb[:, :, 0].astype(np.float64)
    g = rgb[:, :, 1].astype(np.float64)
    b = rgb[:, :, 2].astype(np.float64)
    return LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b


class LuminanceThresholder:
    """Binariza: bit = 1 si la luma supera el umbral (filtro de ruido grueso)"""

    def __init__(self, cutoff: float = LUMA_THRESHOLD):
        self.cutoff = cutoff

    def threshold(self, surface: Surface, height: Optional[int] = None) -> Bitmap:
        width, src_h = surface.size
        if height is None:
            height = src_h
        if width < 0 or height < 0:
            raise InvalidGeometry(f"Invalid bitmap size {width}x{height}")
        if height > src_h:
            raise InvalidGeometry(f"Working height {height} exceeds source height {src_h}")
        if width == 0 or height == 0:
            return Bitmap(np.zeros((width, height), dtype=np.uint8))

        rgb = surface.rgb16()[:height]
        mask = luma16(rgb) > self.cutoff
        # filas x columnas -> columnas x filas
        bitmap = Bitmap(mask.T.astype(np.uint8))
        logger.debug("bitmap size: %d x %d", bitmap.width, bitmap.height)
        return bitmap

    def preview(self, surface: Surface, bitmap: Bitmap) -> Image.Image:
        """
        Copia de diagnóstico: píxel original donde el bit es 1, negro donde es 0.
        """
        src = np.asarray(surface.to_image(), dtype=np.uint8)[:bitmap.height, :bitmap.width]
        keep = bitmap.columns.T.astype(bool)[:, :, None]
        return Image.fromarray(np.where(keep, src, 0).astype(np.uint8))
