from __future__ import annotations
from dataclasses import dataclass
from typing import List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_DPI, DEFAULT_FONT_SIZE


@dataclass(frozen=True, eq=False)
class Bitmap:
    """
    Rejilla binaria en orden columna-mayor.
    columns[x, y] = bit (0/1) de la columna x, fila y.
    """
    columns: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.columns, dtype=np.uint8)
        if arr.ndim != 2:
            raise ValueError(f"Bitmap needs a 2-D array, got shape {arr.shape}")
        arr = arr.copy()
        arr.flags.writeable = False
        object.__setattr__(self, "columns", arr)

    @classmethod
    def empty(cls, height: int) -> "Bitmap":
        return cls(np.zeros((0, height), dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.columns.shape[0])

    @property
    def height(self) -> int:
        return int(self.columns.shape[1])

    def column(self, x: int) -> List[int]:
        return [int(b) for b in self.columns[x]]

    def to_lists(self) -> List[List[int]]:
        return self.columns.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self.columns.shape == other.columns.shape and bool(np.array_equal(self.columns, other.columns))

    __hash__ = None


class MaskFrame(BaseModel):
    """Par (bitmap empaquetado, stream de color) listo para el transporte"""
    model_config = ConfigDict(frozen=True)

    bitmap: bytes = b""
    colors: bytes = b""

    @property
    def columns(self) -> int:
        return len(self.bitmap) // 2

    def payload(self) -> bytes:
        return self.bitmap + self.colors


class TextFrameRequest(BaseModel):
    text: str = Field(default="", max_length=256)
    font: str | None = Field(default=None, max_length=260)
    size: float = Field(default=DEFAULT_FONT_SIZE, gt=0, le=96)
    dpi: float = Field(default=DEFAULT_DPI, gt=0, le=600)


class FrameResponse(BaseModel):
    columns: int
    bitmap: str  # hex
    colors: str  # hex

    @classmethod
    def from_frame(cls, frame: MaskFrame) -> "FrameResponse":
        return cls(columns=frame.columns, bitmap=frame.bitmap.hex(), colors=frame.colors.hex())
