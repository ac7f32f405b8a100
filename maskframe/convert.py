import argparse
import logging
import sys
from pathlib import Path

from .builder import MaskFrameBuilder
from .config import load_settings
from .debug import DebugSink, DirectoryDebugSink
from .errors import MaskFrameError
from .fonts import FontProvider
from .logging_config import setup_logging
from .surface import open_image

logger = logging.getLogger(__name__)


def convert(args, settings) -> int:
    sink = DirectoryDebugSink(args.debug_dir) if args.debug_dir else DebugSink()
    builder = MaskFrameBuilder(debug_sink=sink)

    if args.text is not None:
        fonts = FontProvider(
            font_dirs=settings.font_dirs,
            font_url=settings.font_url,
            cache_dir=settings.font_cache_dir,
        )
        font = fonts.load(args.font or settings.font)
        frame = builder.build_from_text(
            args.text,
            font,
            size=args.size or settings.font_size,
            dpi=args.dpi or settings.font_dpi,
        )
        base = args.out or "text"
    else:
        frame = builder.build_from_image(open_image(args.image))
        base = args.out or str(Path(args.image).with_suffix(""))

    bitmap_path = Path(f"{base}.bitmap.bin")
    colors_path = Path(f"{base}.colors.bin")
    bitmap_path.write_bytes(frame.bitmap)
    colors_path.write_bytes(frame.colors)

    print(f"[OK] {bitmap_path} ({len(frame.bitmap)} bytes, {frame.columns} columns)")
    print(f"[OK] {colors_path} ({len(frame.colors)} bytes)")
    return 0


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Convert an image or a line of text into a mask frame")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("image", nargs="?", help="Input image")
    src.add_argument("--text", help="Text to render instead of an image")
    ap.add_argument("--font", default=None, help="Font file or name ('default' = Pillow builtin)")
    ap.add_argument("--size", type=float, default=None, help="Font size in points")
    ap.add_argument("--dpi", type=float, default=None)
    ap.add_argument("--out", default=None, help="Output path prefix")
    ap.add_argument("--debug-dir", default=None, help="Write intermediate PNGs here")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    settings = load_settings()
    setup_logging(settings.log_dir, level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.debug_dir is None and settings.debug_dir is not None:
        args.debug_dir = settings.debug_dir

    try:
        return convert(args, settings)
    except MaskFrameError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
