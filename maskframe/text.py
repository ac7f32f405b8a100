from __future__ import annotations
import logging
import math

from PIL import Image, ImageDraw

from .config import BASELINE, DEFAULT_DPI, DEFAULT_FONT_SIZE, MASK_HEIGHT
from .errors import FontUnavailable, RenderError
from .fonts import FontFace
from .surface import ImageSurface

logger = logging.getLogger(__name__)


class TextRasterizer:
    """Texto blanco sobre negro, lienzo de MASK_HEIGHT filas y el ancho justo del texto"""

    def __init__(self, height: int = MASK_HEIGHT, baseline: int = BASELINE):
        self.height = height
        self.baseline = baseline

    def rasterize(
        self,
        text: str,
        font: FontFace,
        size: float = DEFAULT_FONT_SIZE,
        dpi: float = DEFAULT_DPI,
    ) -> ImageSurface:
        if font is None:
            raise FontUnavailable("No font given")
        if size <= 0 or dpi <= 0:
            raise RenderError(f"Invalid font size {size} at {dpi} dpi")

        # puntos -> píxeles
        pil_font = font.at_size(size * dpi / 72.0)

        # pasada de medida antes de reservar el lienzo
        try:
            advance = pil_font.getlength(text)
        except (OSError, ValueError, UnicodeError) as e:
            raise RenderError(f"Layout failed for {text!r}: {e}") from e
        if not math.isfinite(advance) or advance < 0:
            raise RenderError(f"Layout returned invalid width {advance} for {text!r}")

        # tinta por encima de la fila 0: el texto no cabe en la máscara
        if text:
            try:
                top = pil_font.getbbox(text, anchor="ls")[1]
            except (OSError, ValueError, UnicodeError) as e:
                raise RenderError(f"Layout failed for {text!r}: {e}") from e
            if self.baseline + top < 0:
                raise RenderError(
                    f"Glyphs of {text!r} rise {-top}px above the baseline, canvas allows {self.baseline}px"
                )

        width = math.ceil(advance)
        logger.debug("text width: %d", width)
        img = Image.new("L", (width, self.height), 0)
        if not text or width == 0:
            return ImageSurface(img)

        try:
            draw = ImageDraw.Draw(img)
            draw.text((0, self.baseline), text, font=pil_font, fill=255, anchor="ls")
            end = draw.textlength(text, font=pil_font)
        except (OSError, ValueError, UnicodeError) as e:
            raise RenderError(f"Draw failed for {text!r}: {e}") from e

        if math.ceil(end) > width:
            raise RenderError(f"Draw pass width {end} exceeds measured width {width}")
        logger.debug("text pixel len: %d", math.ceil(end))
        return ImageSurface(img)
