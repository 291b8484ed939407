"""Process configuration.

Everything the pipeline needs from the environment is read once by
``Settings.from_env()`` and then passed around by reference. No other module
looks at ``os.environ``.
"""

import logging
import os
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
GEMINI_ENDPOINT_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def _env_level(name: str, default: str = "INFO") -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if not raw:
        return default
    if not _is_level_name(raw):
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    return raw


def _is_level_name(name: str) -> bool:
    return isinstance(logging.getLevelName(name), int)


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", name, raw)
        return None


class Settings(BaseModel):
    """Immutable configuration value for one process."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    api_key: str = Field(default="", repr=False, description="Gemini API credential")
    model: str = Field(default=DEFAULT_MODEL, description="Remote image model id")
    endpoint: Optional[str] = Field(default=None, description="REST endpoint override")
    request_deadline: float = Field(
        default=120.0, gt=0, description="Seconds shared by all remote tiers of one request"
    )
    local_workers: Optional[int] = Field(
        default=None, ge=1, description="Local transform pool size, defaults to CPU count"
    )
    log_level: str = Field(default="INFO")

    @field_validator("api_key", mode="before")
    @classmethod
    def _strip_key(cls, value):
        return (value or "").strip()

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.strip().upper()
        if not _is_level_name(value):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def rest_endpoint(self) -> str:
        return self.endpoint or GEMINI_ENDPOINT_TEMPLATE.format(model=self.model)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            endpoint=os.getenv("GEMINI_ENDPOINT") or None,
            request_deadline=_env_float("HEADSHOT_REQUEST_DEADLINE", 120.0),
            local_workers=_env_int("HEADSHOT_LOCAL_WORKERS"),
            log_level=_env_level("HEADSHOT_LOG_LEVEL"),
        )
