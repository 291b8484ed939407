"""
Primary tier: Gemini image model through the managed google-genai client.
"""
import logging
import threading
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from headshot_studio.clients.base import RemoteTier
from headshot_studio.config import Settings
from headshot_studio.deadline import Deadline
from headshot_studio.errors import GenerationError, GenerationErrorKind, UnconfiguredError, classify_status
from headshot_studio.extraction import Extraction, extract
from headshot_studio.models import OptimizedImage

logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]


class PrimaryGenerationClient(RemoteTier):
    name = "primary"

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client
        self._lock = threading.Lock()

    @property
    def client(self):
        with self._lock:
            if self._client is None:
                if not self.settings.configured:
                    raise UnconfiguredError("primary client created without an API key")
                self._client = genai.Client(api_key=self.settings.api_key)
            return self._client

    def invoke(self, image: OptimizedImage, directive: str, deadline: Deadline) -> Extraction:
        self._ensure_time_left(deadline)
        config = types.GenerateContentConfig(
            response_modalities=RESPONSE_MODALITIES,
            http_options=types.HttpOptions(timeout=max(1, int(deadline.timeout() * 1000))),
        )
        contents = [directive, types.Part.from_bytes(data=image.data, mime_type=image.mime_type)]

        logger.info("Calling %s via SDK (prompt: %s...)", self.settings.model, directive[:60])
        try:
            response = self.client.models.generate_content(
                model=self.settings.model,
                contents=contents,
                config=config,
            )
        except GenerationError:
            raise
        except genai_errors.APIError as e:
            kind = classify_status(e.code)
            raise GenerationError(kind, f"SDK status={e.code} message={e.message}") from e
        except httpx.HTTPError as e:
            raise GenerationError(GenerationErrorKind.REMOTE_UNAVAILABLE, f"SDK transport error: {e}") from e
        except Exception as e:
            raise GenerationError(GenerationErrorKind.UNKNOWN, f"SDK call failed: {e}") from e

        extraction = extract(response)
        if extraction.payload is None:
            logger.info("SDK response carried no image")
        else:
            logger.info("Image generated via SDK (found in %s)", extraction.source)
        return extraction
