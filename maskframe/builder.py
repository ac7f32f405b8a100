from __future__ import annotations
import logging
from typing import Optional, Union

import numpy as np
from PIL import Image

from .color import ColorStreamEncoder, SampledColorEncoder, SolidColorEncoder
from .config import DEFAULT_DPI, DEFAULT_FONT_SIZE, MASK_HEIGHT, MASK_WIDTH
from .debug import DebugSink
from .fonts import FontFace
from .geometry import GeometryNormalizer
from .models import MaskFrame
from .packer import BitmapPacker
from .surface import Surface, as_surface
from .text import TextRasterizer
from .threshold import LuminanceThresholder

logger = logging.getLogger(__name__)


class MaskFrameBuilder:
    """
    Orquesta el pipeline completo:

        texto:  rasterizar -> umbral -> empaquetar  + color sólido
        imagen: normalizar -> umbral -> empaquetar  + color muestreado

    No guarda estado entre llamadas; se puede compartir entre hilos.
    """

    def __init__(
        self,
        mask_width: int = MASK_WIDTH,
        mask_height: int = MASK_HEIGHT,
        text_colors: Optional[ColorStreamEncoder] = None,
        image_colors: Optional[ColorStreamEncoder] = None,
        debug_sink: Optional[DebugSink] = None,
    ):
        self.mask_height = mask_height
        self.normalizer = GeometryNormalizer(mask_width, mask_height)
        self.rasterizer = TextRasterizer(height=mask_height)
        self.thresholder = LuminanceThresholder()
        self.packer = BitmapPacker(rows=mask_height)
        self.text_colors = text_colors or SolidColorEncoder()
        self.image_colors = image_colors or SampledColorEncoder(rows=mask_height)
        self.debug_sink = debug_sink or DebugSink()

    def build_from_text(
        self,
        text: str,
        font: FontFace,
        size: float = DEFAULT_FONT_SIZE,
        dpi: float = DEFAULT_DPI,
    ) -> MaskFrame:
        canvas = self.rasterizer.rasterize(text, font, size=size, dpi=dpi)
        self._dump("text", canvas)

        bitmap = self.thresholder.threshold(canvas, height=self.mask_height)
        self._dump_preview("text_gray", canvas, bitmap)

        packed = self.packer.pack(bitmap)
        colors = self.text_colors.encode(len(packed) // 2, canvas)
        logger.info(f"Text frame built: {len(packed) // 2} columns")
        return MaskFrame(bitmap=packed, colors=colors)

    def build_from_image(self, image: Union[Surface, Image.Image, np.ndarray]) -> MaskFrame:
        surface = self.normalizer.normalize(as_surface(image))
        self._dump("resized", surface)

        bitmap = self.thresholder.threshold(surface, height=self.mask_height)
        self._dump_preview("gray", surface, bitmap)

        packed = self.packer.pack(bitmap)
        colors = self.image_colors.encode(bitmap.width, surface)
        logger.info(f"Image frame built: {bitmap.width} columns, {len(colors)} color bytes")
        return MaskFrame(bitmap=packed, colors=colors)

    def _dump(self, name: str, surface: Surface) -> None:
        if surface.width == 0 or surface.height == 0:
            return
        try:
            self.debug_sink.dump(name, surface.to_image())
        except Exception as e:
            logger.error(f"Debug dump {name} failed: {e}")

    def _dump_preview(self, name: str, surface: Surface, bitmap) -> None:
        if bitmap.width == 0 or bitmap.height == 0:
            return
        try:
            self.debug_sink.dump(name, self.thresholder.preview(surface, bitmap))
        except Exception as e:
            logger.error(f"Debug dump {name} failed: {e}")
