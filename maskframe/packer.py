"""
Formato de la máscara: 2 bytes por columna, little-endian.

    byte bajo:  filas 0-7,  fila 0 -> bit 7 (128) ... fila 7 -> bit 0 (1)
    byte alto:  filas 8-15, fila 8 -> bit 15 (32768) ... fila 15 -> bit 8 (256)

El pipeline trabaja con MASK_HEIGHT (12) filas; las filas 12-15 de cada
palabra quedan siempre a cero.
"""
from __future__ import annotations
import logging
from typing import Sequence, Union

import numpy as np

from .config import MASK_HEIGHT, WORD_ROWS
from .errors import EncodingError
from .models import Bitmap

logger = logging.getLogger(__name__)

BitmapLike = Union[Bitmap, Sequence[Sequence[int]]]


def row_weight(row: int) -> int:
    if row < 8:
        return 1 << (7 - row)
    return 1 << (23 - row)


ROW_WEIGHTS = np.array([row_weight(r) for r in range(WORD_ROWS)], dtype=np.uint32)


class BitmapPacker:

    def __init__(self, rows: int = MASK_HEIGHT):
        if not 0 < rows <= WORD_ROWS:
            raise EncodingError(f"Packer supports 1..{WORD_ROWS} rows, got {rows}")
        self.rows = rows

    def _as_array(self, bitmap: BitmapLike) -> np.ndarray:
        if isinstance(bitmap, Bitmap):
            if bitmap.width and bitmap.height != self.rows:
                raise EncodingError(f"column 0 wrong len {bitmap.height}, expected {self.rows}")
            return bitmap.columns

        # columnas sueltas: se valida cada una, una columna corta es corrupción
        for i, column in enumerate(bitmap):
            if len(column) != self.rows:
                raise EncodingError(f"column {i} wrong len {len(column)}, expected {self.rows}")
        if not len(bitmap):
            return np.zeros((0, self.rows), dtype=np.uint8)
        return np.array(bitmap, dtype=np.int64)

    def pack(self, bitmap: BitmapLike) -> bytes:
        cols = self._as_array(bitmap)
        if cols.shape[0] == 0:
            return b""

        bad = (cols != 0) & (cols != 1)
        if bad.any():
            col = int(np.argwhere(bad)[0][0])
            raise EncodingError(f"column {col} has non-binary values")

        words = cols.astype(np.uint32) @ ROW_WEIGHTS[:self.rows]
        data = words.astype("<u2").tobytes()
        logger.debug("bitmap mask size: %d", len(data))
        return data

    def unpack(self, data: bytes) -> Bitmap:
        """Inverso de pack (diagnóstico)"""
        if len(data) % 2:
            raise EncodingError(f"Packed bitmap has odd length {len(data)}")
        words = np.frombuffer(data, dtype="<u2").astype(np.uint32)
        bits = (words[:, None] & ROW_WEIGHTS[None, :self.rows]) != 0
        return Bitmap(bits.astype(np.uint8))
