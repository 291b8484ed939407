"""Deterministic local headshot filters.

This is the last tier of the fallback chain, so ``transform`` must always
hand back a 1024x1024 JPEG: a styling error falls back to the unstyled
image, and a source that cannot be decoded at all becomes a flat grey
canvas. Every step is a pure Pillow/numpy operation, so the same input
bytes always produce the same output bytes.
"""

import logging
from io import BytesIO
from typing import Optional

import numpy as np
from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from headshot_studio.errors import ImageDecodeError
from headshot_studio.styles import LocalParams, lookup

logger = logging.getLogger(__name__)

OUTPUT_SIZE = 1024
FINAL_QUALITY = 95
AUTOCONTRAST_CUTOFF = 1
_PLACEHOLDER_GREY = (128, 128, 128)


def decode_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except Exception as e:
        raise ImageDecodeError(f"cannot decode image: {e}") from e
    return img


def resize_cover(img: Image.Image, tw: int = OUTPUT_SIZE, th: int = OUTPUT_SIZE) -> Image.Image:
    """Scale so the image covers ``tw``x``th`` then crop the overflow around the center."""
    w, h = img.size
    if w == 0 or h == 0:
        return Image.new(img.mode, (tw, th))
    scale = max(tw / w, th / h)
    nw, nh = max(tw, round(w * scale)), max(th, round(h * scale))
    img2 = img.resize((nw, nh), Image.LANCZOS)
    left = (nw - tw) // 2
    top = (nh - th) // 2
    return img2.crop((left, top, left + tw, top + th))


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    if img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buf = BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def _shift_hue(img: Image.Image, degrees: int) -> Image.Image:
    # Pillow stores hue as 0-255 for a full turn.
    shift = int(round(degrees / 360.0 * 256)) % 256
    if shift == 0:
        return img
    hsv = np.asarray(img.convert("HSV"), dtype=np.uint8)
    hue = ((hsv[..., 0].astype(np.uint16) + shift) % 256).astype(np.uint8)
    bands = [Image.fromarray(np.ascontiguousarray(c)) for c in (hue, hsv[..., 1], hsv[..., 2])]
    return Image.merge("HSV", bands).convert("RGB")


def _gamma_lut(gamma: float, bands: int):
    table = [min(255, int(round(255 * (i / 255.0) ** (1.0 / gamma)))) for i in range(256)]
    return table * bands


def apply_style(img: Image.Image, params: LocalParams) -> Image.Image:
    """Run the style operations in their fixed order on a decoded image."""
    img = img.convert("L") if params.greyscale else img.convert("RGB")

    if params.brightness != 1.0:
        img = ImageEnhance.Brightness(img).enhance(params.brightness)
    if img.mode == "RGB":
        if params.saturation != 1.0:
            img = ImageEnhance.Color(img).enhance(params.saturation)
        if params.hue:
            img = _shift_hue(img, params.hue)

    if params.normalize:
        img = ImageOps.autocontrast(img, cutoff=AUTOCONTRAST_CUTOFF)

    if params.gamma:
        img = img.point(_gamma_lut(params.gamma, len(img.getbands())))

    if params.sharpen is not None:
        img = img.filter(
            ImageFilter.UnsharpMask(
                radius=params.sharpen.sigma, percent=params.sharpen.percent, threshold=2
            )
        )

    if params.kernel is not None:
        img = img.filter(ImageFilter.Kernel((3, 3), params.kernel, scale=1))

    return img


def finalize_image(data: bytes, quality: int = FINAL_QUALITY) -> bytes:
    """Cover-fit any decodable image to the output square and encode it as JPEG.

    Raises ``ImageDecodeError`` when ``data`` is not an image.
    """
    img = decode_image(data)
    return _encode_jpeg(resize_cover(img.convert("RGB")), quality)


def _placeholder(quality: int) -> bytes:
    return _encode_jpeg(Image.new("RGB", (OUTPUT_SIZE, OUTPUT_SIZE), _PLACEHOLDER_GREY), quality)


def transform(image_bytes: bytes, style: Optional[str]) -> bytes:
    profile = lookup(style)
    params = profile.local

    try:
        source = decode_image(image_bytes)
    except ImageDecodeError as e:
        logger.warning("local transform got undecodable input, using placeholder: %s", e)
        return _placeholder(params.quality)

    try:
        styled = apply_style(source, params)
    except Exception:
        logger.exception("local %s style failed, using unstyled image", profile.key)
        styled = source.convert("RGB")

    try:
        return _encode_jpeg(resize_cover(styled), params.quality)
    except Exception:
        logger.exception("local resize/encode failed, using placeholder")
        return _placeholder(params.quality)
