import logging
from io import BytesIO

from PIL import Image

from headshot_studio.models import OUTPUT_MIME_TYPE, OptimizedImage

logger = logging.getLogger(__name__)

MAX_DIMENSION = 1024
OPTIMIZE_QUALITY = 85


def optimize_image(data: bytes, mime_type: str) -> OptimizedImage:
    """Shrink oversized uploads before they are sent to the model.

    Images that already fit in ``MAX_DIMENSION`` on both axes pass through
    untouched. Larger ones are fit inside the box (aspect kept, never
    upscaled) and re-encoded as JPEG. Any decode problem returns the input
    as-is so the pipeline keeps going.
    """
    try:
        img = Image.open(BytesIO(data))
        w, h = img.size
        if max(w, h) <= MAX_DIMENSION:
            return OptimizedImage(data=data, mime_type=mime_type)

        img = img.convert("RGB")
        img.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.LANCZOS)
        buf = BytesIO()
        img.save(buf, format="JPEG", quality=OPTIMIZE_QUALITY)
        logger.info("optimized input %sx%s -> %sx%s", w, h, img.width, img.height)
        return OptimizedImage(data=buf.getvalue(), mime_type=OUTPUT_MIME_TYPE)
    except Exception as e:
        logger.warning("optimize_image failed, sending original: %s", e)
        return OptimizedImage(data=data, mime_type=mime_type)
