from __future__ import annotations
import logging
from typing import Tuple

from .config import MASK_HEIGHT, MASK_WIDTH
from .errors import InvalidGeometry
from .surface import Box, Surface

logger = logging.getLogger(__name__)


class GeometryNormalizer:
    """
    Recorta al aspecto de la máscara (nunca rellena) y redimensiona
    a MASK_HEIGHT filas con vecino más cercano.
    El ancho final sale proporcional, no se fuerza a MASK_WIDTH.
    """

    def __init__(self, mask_width: int = MASK_WIDTH, mask_height: int = MASK_HEIGHT):
        if mask_width <= 0 or mask_height <= 0:
            raise InvalidGeometry(f"Invalid mask geometry {mask_width}x{mask_height}")
        self.mask_width = mask_width
        self.mask_height = mask_height

    def crop_box(self, width: int, height: int) -> Box:
        """Caja centrada con el aspecto mask_width/mask_height"""
        _check_size(width, height)
        mw, mh = self.mask_width, self.mask_height

        # comparación exacta: w/h frente a mw/mh
        if width * mh > height * mw:
            new_w = round(height * mw / mh)
            if new_w <= 0:
                raise InvalidGeometry(f"Crop of {width}x{height} leaves no columns")
            x = (width - new_w) // 2
            return (x, 0, x + new_w, height)
        if width * mh < height * mw:
            new_h = round(width * mh / mw)
            if new_h <= 0:
                raise InvalidGeometry(f"Crop of {width}x{height} leaves no rows")
            y = (height - new_h) // 2
            return (0, y, width, y + new_h)
        return (0, 0, width, height)

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        _check_size(width, height)
        new_w = round(self.mask_height * width / height)
        if new_w <= 0:
            raise InvalidGeometry(f"Resize of {width}x{height} leaves no columns")
        return new_w, self.mask_height

    def normalize(self, surface: Surface) -> Surface:
        try:
            width, height = surface.size
        except (AttributeError, OSError) as e:
            raise InvalidGeometry(f"Unreadable pixel source: {e}") from e

        box = self.crop_box(width, height)
        if box != (0, 0, width, height):
            surface = surface.crop(box)
            logger.debug("cropped image size: %d x %d", box[2] - box[0], box[3] - box[1])

        new_w, new_h = self.target_size(*surface.size)
        if (new_w, new_h) != surface.size:
            surface = surface.resize_nearest(new_w, new_h)
        logger.debug("resized image size: %d x %d", new_w, new_h)
        return surface


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Invalid image size {width}x{height}")
