from __future__ import annotations


class MaskFrameError(Exception):
    """Error base del pipeline de la máscara"""


class InvalidGeometry(MaskFrameError):
    """Dimensiones nulas/negativas o recorte que deja una imagen vacía"""


class FontUnavailable(MaskFrameError):
    """La fuente no se encuentra o no se puede parsear"""


class RenderError(MaskFrameError):
    """Fallo al maquetar o dibujar el texto"""


class EncodingError(MaskFrameError):
    """Columna del bitmap con un número de filas distinto al del empaquetador"""
