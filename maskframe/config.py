from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Geometría nominal del dispositivo
MASK_WIDTH = 40
MASK_HEIGHT = 12

# Filas que caben en una palabra empaquetada de 16 bits
WORD_ROWS = 16

# Escala de 16 bits por canal (0..65535)
LUMA_THRESHOLD = 15000

DEFAULT_FONT = "NotoSans-Regular.ttf"
DEFAULT_FONT_SIZE = 14.0
DEFAULT_DPI = 72.0
BASELINE = 12

SYSTEM_FONT_DIRS = [
    "~/.fonts",
    "~/.local/share/fonts",
    "/usr/share/fonts",
    "/usr/local/share/fonts",
    "/Library/Fonts",
    "~/Library/Fonts",
    "C:/Windows/Fonts",
]

BASE = Path(__file__).resolve().parent.parent


class Settings(BaseModel):
    font: str = DEFAULT_FONT
    font_size: float = Field(default=DEFAULT_FONT_SIZE, gt=0)
    font_dpi: float = Field(default=DEFAULT_DPI, gt=0)
    font_dirs: List[str] = Field(default_factory=lambda: list(SYSTEM_FONT_DIRS))
    font_url: Optional[str] = None
    font_cache_dir: Path = Path("/tmp/maskframe_fonts")

    # vacío = sin volcados de diagnóstico
    debug_dir: Optional[Path] = None
    # vacío = solo consola
    log_dir: Optional[Path] = None


def _split_dirs(value: str) -> List[str]:
    return [d for d in value.split(os.pathsep) if d.strip()]


def load_settings(env_file: Path | None = None) -> Settings:
    """Lee la configuración de .env y de las variables MASKFRAME_*"""
    load_dotenv(env_file or BASE / ".env")

    values = {}
    env = os.environ
    if env.get("MASKFRAME_FONT"):
        values["font"] = env["MASKFRAME_FONT"]
    if env.get("MASKFRAME_FONT_SIZE"):
        values["font_size"] = env["MASKFRAME_FONT_SIZE"]
    if env.get("MASKFRAME_FONT_DPI"):
        values["font_dpi"] = env["MASKFRAME_FONT_DPI"]
    if env.get("MASKFRAME_FONT_DIRS"):
        values["font_dirs"] = _split_dirs(env["MASKFRAME_FONT_DIRS"])
    if env.get("MASKFRAME_FONT_URL"):
        values["font_url"] = env["MASKFRAME_FONT_URL"]
    if env.get("MASKFRAME_FONT_CACHE_DIR"):
        values["font_cache_dir"] = env["MASKFRAME_FONT_CACHE_DIR"]
    if env.get("MASKFRAME_DEBUG_DIR"):
        values["debug_dir"] = env["MASKFRAME_DEBUG_DIR"]
    if env.get("MASKFRAME_LOG_DIR"):
        values["log_dir"] = env["MASKFRAME_LOG_DIR"]

    return Settings.model_validate(values)
