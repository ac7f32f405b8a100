from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from .config import MASK_HEIGHT
from .errors import InvalidGeometry
from .surface import Surface

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
WHITE: RGB = (255, 255, 255)


class ColorStreamEncoder(ABC):
    """Stream RGB que acompaña al bitmap empaquetado"""

    @abstractmethod
    def encode(self, columns: int, surface: Optional[Surface] = None) -> bytes:
        ...


class SolidColorEncoder(ColorStreamEncoder):
    """Un triplete por columna, todos del mismo color (texto blanco por defecto)"""

    def __init__(self, color: RGB = WHITE):
        if len(color) != 3 or any(not 0 <= int(c) <= 255 for c in color):
            raise ValueError(f"Invalid RGB color {color!r}")
        self.color = bytes(int(c) for c in color)

    def encode(self, columns: int, surface: Optional[Surface] = None) -> bytes:
        if columns < 0:
            raise InvalidGeometry(f"Negative column count {columns}")
        return self.color * columns


class SampledColorEncoder(ColorStreamEncoder):
    """
    Un triplete por píxel, recorriendo columna a columna y cada columna de arriba abajo.
    Cada canal de 16 bits se trunca a 8 con >> 8 (sin redondeo).
    Experimental: el dispositivo todavía no tiene un consumidor estable para este stream.
    """

    def __init__(self, rows: int = MASK_HEIGHT):
        self.rows = rows

    def encode(self, columns: int, surface: Optional[Surface] = None) -> bytes:
        if surface is None:
            raise ValueError("Sampled color stream needs a source surface")
        if columns < 0:
            raise InvalidGeometry(f"Negative column count {columns}")
        width, height = surface.size
        if columns > width or self.rows > height:
            raise InvalidGeometry(
                f"Cannot sample {columns}x{self.rows} from a {width}x{height} image"
            )
        if columns == 0 or self.rows == 0:
            return b""

        rgb = surface.rgb16()[:self.rows, :columns]
        # HxWx3 -> WxHx3 (columna-mayor)
        data = (np.transpose(rgb, (1, 0, 2)) >> 8).astype(np.uint8).tobytes()
        logger.debug("color array size: %d", len(data))
        return data
