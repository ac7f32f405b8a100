from __future__ import annotations

from fastapi import FastAPI, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from .builder import MaskFrameBuilder
from .config import MASK_HEIGHT, MASK_WIDTH, load_settings
from .debug import DebugSink, DirectoryDebugSink
from .errors import EncodingError, FontUnavailable, InvalidGeometry, MaskFrameError
from .fonts import FontProvider
from .logging_config import setup_logging
from .models import FrameResponse, MaskFrame, TextFrameRequest
from .surface import open_image

settings = load_settings()

# Configurar logging
logger = setup_logging(settings.log_dir)
logger.info("=== Starting maskframe service ===")

fonts = FontProvider(
    font_dirs=settings.font_dirs,
    font_url=settings.font_url,
    cache_dir=settings.font_cache_dir,
    allow_paths=False,
)
builder = MaskFrameBuilder(
    debug_sink=DirectoryDebugSink(settings.debug_dir) if settings.debug_dir else DebugSink(),
)

app = FastAPI(title=f"Mask frames {MASK_WIDTH}x{MASK_HEIGHT}")

MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def _http_error(e: MaskFrameError) -> HTTPException:
    if isinstance(e, FontUnavailable):
        return HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    if isinstance(e, (InvalidGeometry, EncodingError)):
        return HTTPException(422, str(e))
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Render failed: {e}")


def _text_frame(req: TextFrameRequest) -> MaskFrame:
    try:
        font = fonts.load(req.font or settings.font)
        return builder.build_from_text(req.text, font, size=req.size, dpi=req.dpi)
    except MaskFrameError as e:
        logger.error(f"Text frame failed for {req.text!r}: {e}")
        raise _http_error(e)


@app.get("/api/health")
def health():
    return {"status": "ok", "mask_width": MASK_WIDTH, "mask_height": MASK_HEIGHT}


@app.post("/api/frames/text", response_model=FrameResponse)
def text_frame(req: TextFrameRequest):
    return FrameResponse.from_frame(_text_frame(req))


@app.post("/api/frames/text.bin")
def text_frame_bin(req: TextFrameRequest):
    """Bitmap empaquetado seguido del stream de color, tal cual va al transporte"""
    frame = _text_frame(req)
    return Response(
        content=frame.payload(),
        media_type="application/octet-stream",
        headers={"X-Mask-Columns": str(frame.columns)},
    )


@app.post("/api/frames/image", response_model=FrameResponse)
async def image_frame(image: UploadFile = File(...)):
    content = await image.read()
    if not content:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Empty upload")
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(413, "Image too large")

    try:
        frame = builder.build_from_image(open_image(content))
    except MaskFrameError as e:
        logger.error(f"Image frame failed for {image.filename}: {e}")
        raise _http_error(e)

    logger.info(f"Image frame built from {image.filename}: {frame.columns} columns")
    return FrameResponse.from_frame(frame)
