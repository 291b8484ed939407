"""Error taxonomy for the generation pipeline."""

from enum import Enum
from typing import Optional


class GenerationErrorKind(str, Enum):
    UNCONFIGURED = "unconfigured"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    NO_IMAGE_IN_RESPONSE = "no_image_in_response"
    UNKNOWN = "unknown"


MESSAGES = {
    GenerationErrorKind.UNCONFIGURED: "Gemini API key not configured. Set GEMINI_API_KEY in your environment.",
    GenerationErrorKind.UNAUTHORIZED: "Invalid API key. Please check your GEMINI_API_KEY.",
    GenerationErrorKind.FORBIDDEN: "API access denied. Please check your API permissions.",
    GenerationErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again later.",
    GenerationErrorKind.REMOTE_UNAVAILABLE: "Google API service error. Please try again later.",
    GenerationErrorKind.NO_IMAGE_IN_RESPONSE: "No image returned from model.",
    GenerationErrorKind.UNKNOWN: "Failed to generate headshot. Please try again.",
}


def classify_status(status_code: Optional[int]) -> GenerationErrorKind:
    if status_code == 401:
        return GenerationErrorKind.UNAUTHORIZED
    if status_code == 403:
        return GenerationErrorKind.FORBIDDEN
    if status_code == 429:
        return GenerationErrorKind.RATE_LIMITED
    if status_code is not None and status_code >= 500:
        return GenerationErrorKind.REMOTE_UNAVAILABLE
    return GenerationErrorKind.UNKNOWN


class GenerationError(Exception):
    """A tier failure with a classified kind.

    ``detail`` keeps the upstream text (status line, body snippet) for logs;
    ``str(err)`` is the human-readable message shown to callers.
    """

    def __init__(self, kind: GenerationErrorKind, detail: str = "", message: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(message or MESSAGES[kind])


class UnconfiguredError(GenerationError):
    def __init__(self, detail: str = ""):
        super().__init__(GenerationErrorKind.UNCONFIGURED, detail)


class ImageDecodeError(ValueError):
    """Raised when bytes that should hold an image cannot be decoded."""
