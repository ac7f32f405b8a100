from __future__ import annotations
import logging
from pathlib import Path

from PIL import Image

from .utils import ensure_dir, safe_filename

logger = logging.getLogger(__name__)


class DebugSink:
    """Destino de los volcados de diagnóstico; por defecto no hace nada"""

    def dump(self, name: str, image: Image.Image) -> None:
        pass


class DirectoryDebugSink(DebugSink):
    """Guarda cada volcado como PNG en un directorio"""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def dump(self, name: str, image: Image.Image) -> None:
        path = self.directory / f"{safe_filename(name)}.png"
        try:
            ensure_dir(self.directory)
            image.save(path, format="PNG")
        except Exception as e:
            # un volcado fallido nunca aborta la conversión
            logger.error(f"Debug dump {path} failed: {e}")
            return
        logger.debug(f"Debug dump written: {path}")
