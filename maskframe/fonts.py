from __future__ import annotations
import hashlib
import logging
import threading
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable, Optional

import requests
from PIL import ImageFont

from .config import SYSTEM_FONT_DIRS
from .errors import FontUnavailable

logger = logging.getLogger(__name__)

# Fuente embebida en Pillow
DEFAULT_FACE = "default"

FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")


@dataclass(frozen=True)
class FontFace:
    """Fuente ya leída; data=None es la fuente embebida de Pillow"""
    name: str
    data: Optional[bytes] = None

    def at_size(self, pixels: float) -> ImageFont.FreeTypeFont:
        try:
            if self.data is None:
                return ImageFont.load_default(size=pixels)
            return ImageFont.truetype(BytesIO(self.data), size=pixels)
        except (OSError, ValueError) as e:
            raise FontUnavailable(f"Cannot load font {self.name!r} at size {pixels}: {e}") from e


class FontProvider:
    """
    Resuelve un nombre de fuente a un FontFace:
    ruta explícita, directorios de fuentes del sistema o descarga cacheada.
    Con allow_paths=False solo se aceptan nombres de fichero sueltos (servicio HTTP).
    """

    def __init__(
        self,
        font_dirs: Iterable[str] = SYSTEM_FONT_DIRS,
        font_url: Optional[str] = None,
        cache_dir: Optional[Path] = None,
        timeout: float = 10,
        allow_paths: bool = True,
    ):
        self.font_dirs = [Path(d).expanduser() for d in font_dirs]
        self.font_url = font_url
        self.cache_dir = Path(cache_dir) if cache_dir else None
        self.timeout = timeout
        self.allow_paths = allow_paths
        self._lock = threading.Lock()
        self._faces: Dict[str, FontFace] = {}

    def load(self, name: str) -> FontFace:
        name = (name or "").strip()
        if not name:
            raise FontUnavailable("Empty font name")

        with self._lock:
            face = self._faces.get(name)
            if face is None:
                face = self._resolve(name)
                # parseo de prueba: una fuente corrupta falla aquí y no al dibujar
                face.at_size(10)
                self._faces[name] = face
                logger.info(f"Font loaded: {name}")
        return face

    def _resolve(self, name: str) -> FontFace:
        if name == DEFAULT_FACE:
            return FontFace(name)

        if self.allow_paths:
            path = Path(name).expanduser()
            if path.is_file():
                return FontFace(name, path.read_bytes())
        elif _is_path(name):
            # mismo mensaje que una fuente inexistente
            raise FontUnavailable(f"Font not found: {name}")

        found = self.find(name)
        if found is not None:
            logger.debug(f"Font {name} found at {found}")
            return FontFace(name, found.read_bytes())

        if self.font_url:
            return FontFace(name, self._download(name))

        raise FontUnavailable(f"Font not found: {name}")

    def find(self, name: str) -> Optional[Path]:
        """Busca por nombre de fichero (sin distinguir mayúsculas) en los directorios de fuentes"""
        target = name.lower()
        for root in self.font_dirs:
            if not root.is_dir():
                continue
            for p in sorted(root.rglob("*")):
                if p.suffix.lower() not in FONT_EXTENSIONS:
                    continue
                if p.name.lower() == target or p.stem.lower() == target:
                    return p
        return None

    def _download(self, name: str) -> bytes:
        """Descarga y cachea la fuente desde font_url"""
        url = self.font_url.rstrip("/") + "/" + name
        cache_path = None
        if self.cache_dir is not None:
            font_hash = hashlib.md5(url.encode()).hexdigest()
            cache_path = self.cache_dir / f"{font_hash}{Path(name).suffix or '.ttf'}"
            if cache_path.exists():
                return cache_path.read_bytes()

        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FontUnavailable(f"Cannot download font {name} from {url}: {e}") from e

        if cache_path is not None:
            try:
                self.cache_dir.mkdir(parents=True, exist_ok=True)
                cache_path.write_bytes(response.content)
                logger.info(f"Font downloaded: {url}")
            except OSError as e:
                logger.warning(f"Cannot cache font {name}: {e}")
        return response.content


def _is_path(name: str) -> bool:
    return (
        Path(name).name != name
        or "/" in name
        or "\\" in name
        or name.startswith("~")
        or name in (".", "..")
    )
