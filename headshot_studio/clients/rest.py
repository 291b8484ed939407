"""
Secondary tier: the same Gemini model through a raw REST call.
"""
import base64
import logging
from typing import Optional

import requests

from headshot_studio.clients.base import RemoteTier
from headshot_studio.config import Settings
from headshot_studio.deadline import Deadline
from headshot_studio.errors import GenerationError, GenerationErrorKind, UnconfiguredError, classify_status
from headshot_studio.extraction import Extraction, extract
from headshot_studio.models import OptimizedImage

logger = logging.getLogger(__name__)

CALL_TIMEOUT_SECONDS = 120.0
GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 8192,
}


def build_payload(image: OptimizedImage, directive: str) -> dict:
    return {
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"text": directive},
                    {
                        "inlineData": {
                            "mimeType": image.mime_type or "image/jpeg",
                            "data": base64.b64encode(image.data).decode("utf-8"),
                        }
                    },
                ],
            }
        ],
        "generationConfig": dict(GENERATION_CONFIG),
    }


class SecondaryGenerationClient(RemoteTier):
    name = "secondary"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def invoke(self, image: OptimizedImage, directive: str, deadline: Deadline) -> Extraction:
        if not self.settings.configured:
            raise UnconfiguredError("secondary client called without an API key")
        self._ensure_time_left(deadline)
        timeout = deadline.timeout(CALL_TIMEOUT_SECONDS)

        logger.info("Calling Gemini REST API (timeout=%.1fs)", timeout)
        try:
            resp = self.session.post(
                self.settings.rest_endpoint,
                headers={
                    "Content-Type": "application/json",
                    "X-goog-api-key": self.settings.api_key,
                },
                json=build_payload(image, directive),
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise GenerationError(GenerationErrorKind.REMOTE_UNAVAILABLE, f"REST transport error: {e}") from e

        if resp.status_code != 200:
            snippet = (resp.text or "")[:400]
            logger.error("REST non-200 status=%s body=%s", resp.status_code, snippet)
            raise GenerationError(classify_status(resp.status_code), f"REST status={resp.status_code} body={snippet}")

        try:
            data = resp.json()
        except ValueError as e:
            raise GenerationError(GenerationErrorKind.UNKNOWN, f"REST response is not JSON: {e}") from e

        extraction = extract(data)
        if extraction.payload is None:
            logger.info("REST response carried no image")
        else:
            logger.info("Image generated via REST (found in %s)", extraction.source)
        return extraction
