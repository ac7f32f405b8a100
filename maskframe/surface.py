"""
Superficies de píxeles.

Toda fuente de píxeles del pipeline implementa la misma capacidad: tamaño,
recorte, redimensionado vecino-más-cercano y lectura de canales en escala de
16 bits. Así el normalizador puede recortar cualquier variante sin comprobar
en tiempo de ejecución si la imagen "sabe" recortarse.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import InvalidGeometry

Box = Tuple[int, int, int, int]

# Modos PIL de un solo canal con más de 8 bits
_WIDE_GRAY_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N", "F")


class Surface(ABC):

    @property
    @abstractmethod
    def size(self) -> Tuple[int, int]:
        """(ancho, alto) en píxeles"""

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @abstractmethod
    def crop(self, box: Box) -> "Surface":
        """Subregión (left, top, right, bottom)"""

    @abstractmethod
    def resize_nearest(self, width: int, height: int) -> "Surface":
        ...

    @abstractmethod
    def rgb16(self) -> np.ndarray:
        """
        Array HxWx3 (uint32) con los canales R, G, B en 0..65535.
        Con alfa, los canales van premultiplicados.
        """

    @abstractmethod
    def to_image(self) -> Image.Image:
        """Copia RGB de 8 bits para volcados de diagnóstico"""


class ImageSurface(Surface):
    """Superficie sobre una imagen PIL en cualquier modo"""

    def __init__(self, image: Image.Image):
        self.image = image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def crop(self, box: Box) -> "ImageSurface":
        return ImageSurface(self.image.crop(box))

    def resize_nearest(self, width: int, height: int) -> "ImageSurface":
        return ImageSurface(self.image.resize((width, height), Image.Resampling.NEAREST))

    def rgb16(self) -> np.ndarray:
        w, h = self.size
        if w == 0 or h == 0:
            return np.zeros((h, w, 3), dtype=np.uint32)

        img = self.image
        if img.mode in _WIDE_GRAY_MODES:
            gray = np.clip(np.asarray(img, dtype=np.float64), 0, 65535).astype(np.uint32)
            return np.repeat(gray[:, :, None], 3, axis=2)

        if _has_alpha(img):
            arr = np.asarray(img.convert("RGBA"), dtype=np.uint32) * 257
            alpha = arr[:, :, 3:4]
            return arr[:, :, :3] * alpha // 65535

        # 8 bits -> 16 bits replicando el byte (v * 0x101)
        return np.asarray(img.convert("RGB"), dtype=np.uint32) * 257

    def to_image(self) -> Image.Image:
        if self.image.mode in _WIDE_GRAY_MODES:
            return ArraySurface(self.rgb16()).to_image()
        return self.image.convert("RGB")


class ArraySurface(Surface):
    """Superficie sobre un array HxWx3 de muestras de 16 bits"""

    def __init__(self, pixels: np.ndarray):
        arr = np.asarray(pixels)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, None], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] < 3:
            raise InvalidGeometry(f"Expected HxWx3 samples, got shape {arr.shape}")
        self.pixels = np.clip(arr[:, :, :3], 0, 65535).astype(np.uint32)

    @property
    def size(self) -> Tuple[int, int]:
        h, w = self.pixels.shape[:2]
        return w, h

    def crop(self, box: Box) -> "ArraySurface":
        left, top, right, bottom = box
        return ArraySurface(self.pixels[top:bottom, left:right])

    def resize_nearest(self, width: int, height: int) -> "ArraySurface":
        sw, sh = self.size
        if (width, height) == (sw, sh):
            return ArraySurface(self.pixels.copy())
        # muestreo en el centro de cada píxel destino, como PIL NEAREST
        xs = np.minimum(((np.arange(width) + 0.5) * sw / width).astype(int), sw - 1)
        ys = np.minimum(((np.arange(height) + 0.5) * sh / height).astype(int), sh - 1)
        return ArraySurface(self.pixels[ys][:, xs])

    def rgb16(self) -> np.ndarray:
        return self.pixels

    def to_image(self) -> Image.Image:
        return Image.fromarray((self.pixels >> 8).astype(np.uint8))


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA", "RGBa", "La") or (img.mode == "P" and "transparency" in img.info)


def as_surface(source: Union[Surface, Image.Image, np.ndarray]) -> Surface:
    if isinstance(source, Surface):
        return source
    if isinstance(source, Image.Image):
        return ImageSurface(source)
    if isinstance(source, np.ndarray):
        return ArraySurface(source)
    raise TypeError(f"Unsupported pixel source: {type(source).__name__}")


def open_image(source: Union[str, Path, bytes, BinaryIO]) -> ImageSurface:
    """Decodifica una imagen desde ruta, bytes o fichero abierto"""
    if isinstance(source, (bytes, bytearray)):
        source = BytesIO(source)
    try:
        img = Image.open(source)
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise InvalidGeometry(f"Unreadable image: {e}") from e
    return ImageSurface(img)
