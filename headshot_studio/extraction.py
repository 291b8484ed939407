"""Locate the generated image inside a model response.

Responses arrive in two flavours: plain dicts decoded from the REST API
(camelCase keys, base64 strings) and ``google-genai`` response objects
(snake_case attributes, raw bytes). Both are walked with the same lookup
helpers so the search order lives in one place:

    1. ``candidates[*].content.parts[*].inlineData``  -> PartsEmbedded
    2. ``images[0].inlineData``                         -> LegacyImages
    3. nothing                                          -> NoImage

Nothing in here raises; malformed branches are simply skipped.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from headshot_studio.models import ImagePayload


@dataclass(frozen=True)
class PartsEmbedded:
    payload: ImagePayload
    source = "parts"


@dataclass(frozen=True)
class LegacyImages:
    payload: ImagePayload
    source = "images"


@dataclass(frozen=True)
class NoImage:
    payload = None
    source = None


Extraction = Union[PartsEmbedded, LegacyImages, NoImage]


def _field(obj: Any, *names: str) -> Any:
    if obj is None:
        return None
    for name in names:
        if isinstance(obj, dict):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _items(value: Any) -> Iterable[Any]:
    if isinstance(value, (list, tuple)):
        return value
    return ()


def _decode(data: Any) -> Optional[bytes]:
    if isinstance(data, (bytes, bytearray)):
        return bytes(data) or None
    if isinstance(data, str) and data:
        if data.startswith("data:"):
            data = data.split(",", 1)[-1]
        data = "".join(data.split())
        try:
            return base64.b64decode(data, validate=True) or None
        except (binascii.Error, ValueError):
            return None
    return None


def _inline_image(part: Any) -> Optional[ImagePayload]:
    inline = _field(part, "inlineData", "inline_data")
    raw = _decode(_field(inline, "data"))
    if raw is None:
        return None
    mime = _field(inline, "mimeType", "mime_type")
    return ImagePayload(data=raw, mime_type=mime if isinstance(mime, str) and mime else "image/png")


def extract(response: Any) -> Extraction:
    """Return the first inline image in ``response`` as a tagged variant."""
    for candidate in _items(_field(response, "candidates")):
        parts = _field(_field(candidate, "content"), "parts")
        for part in _items(parts):
            payload = _inline_image(part)
            if payload is not None:
                return PartsEmbedded(payload)

    legacy = list(_items(_field(response, "images")))
    if legacy:
        payload = _inline_image(legacy[0])
        if payload is not None:
            return LegacyImages(payload)

    return NoImage()


def extract_payload(response: Any) -> Optional[ImagePayload]:
    return extract(response).payload
