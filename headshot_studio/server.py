import base64
import binascii
import logging
from contextlib import asynccontextmanager
from io import BytesIO
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from PIL import Image
from pydantic import BaseModel

from headshot_studio.config import Settings
from headshot_studio.errors import GenerationErrorKind
from headshot_studio.models import SUPPORTED_MIME_TYPES, GenerationRequest
from headshot_studio.orchestrator import GenerationOrchestrator
from headshot_studio.styles import is_known_style, normalize_style

logger = logging.getLogger("headshot_studio")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MIN_DIMENSION = 100
MAX_DIMENSION = 4096


class GenerateBody(BaseModel):
    style: Optional[str] = None  # corporate | creative | executive
    image: str  # base64-encoded image (or data URL)
    mime_type: Optional[str] = None  # e.g. image/png, image/jpeg, image/webp


def normalize_mime(mime_type: Optional[str]) -> Optional[str]:
    mime = (mime_type or "").strip().lower()
    if mime == "image/jpg":
        return "image/jpeg"
    if mime in SUPPORTED_MIME_TYPES:
        return mime
    return None


def decode_image_b64(b64: str) -> tuple:
    """Decode raw base64 or a data URL; returns ``(bytes, mime_from_data_url)``."""
    data = b64 or ""
    mime = None
    if data.startswith("data:"):
        # data:<mime>;base64,<payload>
        header, _, payload = data.partition(",")
        mime = header[5:].split(";", 1)[0] or None
        data = payload
    try:
        return base64.b64decode(data, validate=True), mime
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="Invalid image base64. Expect raw base64 (or data URL) of JPEG/PNG/WebP.")


def check_dimensions(img_bytes: bytes) -> None:
    try:
        with Image.open(BytesIO(img_bytes)) as img:
            w, h = img.size
    except Exception as e:
        logger.warning("Dimension validation skipped: %s", e)
        return
    if w < MIN_DIMENSION or h < MIN_DIMENSION:
        raise HTTPException(
            status_code=400,
            detail=f"Image dimensions too small. Minimum size is {MIN_DIMENSION}x{MIN_DIMENSION} pixels.",
        )
    if w > MAX_DIMENSION or h > MAX_DIMENSION:
        raise HTTPException(
            status_code=400,
            detail=f"Image dimensions too large. Maximum size is {MAX_DIMENSION}x{MAX_DIMENSION} pixels.",
        )


def to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('utf-8')}"


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[GenerationOrchestrator] = None,
) -> FastAPI:
    if settings is None:
        load_dotenv()
        settings = Settings.from_env()
    logger.setLevel(settings.log_level)
    if orchestrator is None:
        orchestrator = GenerationOrchestrator(settings)
    if not settings.configured:
        logger.warning("Warning: GEMINI_API_KEY not set. Generation requests will fail.")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        orchestrator.close()

    app = FastAPI(title="Headshot Studio API", lifespan=lifespan)
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})

    @app.get("/api/health")
    def health():
        return {"status": "ok", "message": "Headshot Studio API is running"}

    @app.post("/api/generate")
    def generate(body: GenerateBody, request: Request):
        if not body.style:
            raise HTTPException(status_code=400, detail="Style selection is required")
        if not is_known_style(body.style):
            logger.warning("unknown style %r, using %s", body.style, normalize_style(body.style))
        style = normalize_style(body.style)

        input_bytes, url_mime = decode_image_b64(body.image)
        if not input_bytes:
            logger.warning(
                "/api/generate empty image payload from %s", request.client.host if request.client else "unknown"
            )
            raise HTTPException(status_code=400, detail="No image file uploaded")
        if len(input_bytes) > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=400, detail="Image too large. Maximum upload size is 10MB.")

        mime_type = normalize_mime(body.mime_type or url_mime or "image/jpeg")
        if mime_type is None:
            raise HTTPException(status_code=400, detail="Invalid file type. Only JPEG, PNG, and WebP are allowed.")
        check_dimensions(input_bytes)

        logger.info("/api/generate style=%s mime=%s img_len=%s", style, mime_type, len(input_bytes))
        result = orchestrator.operate(GenerationRequest(image_bytes=input_bytes, mime_type=mime_type, style=style))

        if not result.success:
            status = 503 if result.error_kind is GenerationErrorKind.UNCONFIGURED else 500
            raise HTTPException(status_code=status, detail=result.error_message)

        return {
            "success": True,
            "message": "Headshot generated successfully",
            "style": style,
            "generatedImage": to_data_url(result.image_bytes, result.mime_type),
            "mimeType": result.mime_type,
            "processingTime": result.processing_time,
            "tier": result.tier,
            "degraded": result.degraded,
        }

    return app


__all__ = ["create_app"]
