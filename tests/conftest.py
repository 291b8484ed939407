"""Pytest configuration and fixtures for headshot_studio tests."""

import base64
from io import BytesIO
from types import SimpleNamespace

import pytest
from PIL import Image

from headshot_studio.clients.base import RemoteTier
from headshot_studio.config import Settings
from headshot_studio.extraction import NoImage


def make_image(size=(640, 480), fmt="JPEG", mode="RGB") -> bytes:
    """Deterministic gradient image encoded as ``fmt``."""
    w, h = size
    r = Image.linear_gradient("L").resize((w, h))
    g = Image.radial_gradient("L").resize((w, h))
    b = r.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    img = Image.merge("RGB", (r, g, b))
    if mode != "RGB":
        img = img.convert(mode)
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def open_image(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def parts_response(data: bytes, mime_type: str = "image/png") -> dict:
    """REST-shaped response with the image embedded in candidate parts."""
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your headshot."},
                        {"inlineData": {"mimeType": mime_type, "data": b64(data)}},
                    ]
                }
            }
        ]
    }


def sdk_response(data: bytes, mime_type: str = "image/png"):
    """Object-shaped response the way google-genai exposes it."""
    part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeTier(RemoteTier):
    """Remote tier double that returns a fixed extraction or raises."""

    def __init__(self, name, result=None, error=None):
        self.name = name
        self.result = result
        self.error = error
        self.calls = []

    def invoke(self, image, directive, deadline):
        self.calls.append(SimpleNamespace(image=image, directive=directive, deadline=deadline))
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else NoImage()


@pytest.fixture
def settings():
    return Settings(api_key="test-key", local_workers=2)


@pytest.fixture
def unconfigured_settings():
    return Settings(api_key="", local_workers=2)


@pytest.fixture
def portrait_jpeg():
    return make_image((640, 480))


@pytest.fixture
def large_jpeg():
    return make_image((2048, 2048))
