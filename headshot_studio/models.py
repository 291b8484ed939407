from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from headshot_studio.errors import GenerationErrorKind

OUTPUT_MIME_TYPE = "image/jpeg"
SUPPORTED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})


@dataclass(frozen=True)
class GenerationRequest:
    image_bytes: bytes
    mime_type: str
    style: str


@dataclass(frozen=True)
class OptimizedImage:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class ImagePayload:
    """Decoded inline image found in a model response."""

    data: bytes
    mime_type: str = "image/png"


class AttemptOutcome(str, Enum):
    IMAGE_FOUND = "image_found"
    NO_IMAGE = "no_image"
    FAILED = "failed"


@dataclass(frozen=True)
class FallbackAttempt:
    strategy: str
    outcome: AttemptOutcome
    error_kind: Optional[GenerationErrorKind] = None
    detail: str = ""


@dataclass
class GenerationResult:
    success: bool
    mime_type: str = OUTPUT_MIME_TYPE
    processing_time: float = 0.0
    image_bytes: Optional[bytes] = None
    error_kind: Optional[GenerationErrorKind] = None
    error_message: str = ""
    tier: Optional[str] = None
    attempts: List[FallbackAttempt] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True when the image came from the local filter, not the model."""
        return self.tier == "local"
