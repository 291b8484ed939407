"""Three-tier headshot generation.

The fallback chain is an explicit state machine::

    NOT_STARTED -> TRYING_PRIMARY -> TRYING_SECONDARY -> TRYING_LOCAL -> DONE

Remote tiers move on to the next state when they return no image, raise a
classified ``GenerationError`` or hand back bytes that do not decode. The
local tier cannot fail, so the only failure a caller ever sees is a missing
API key, which is checked before any tier runs.
"""

import logging
import os
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum
from typing import Dict, List, Optional

from headshot_studio.clients import PrimaryGenerationClient, RemoteTier, SecondaryGenerationClient
from headshot_studio.config import Settings
from headshot_studio.deadline import Deadline
from headshot_studio.errors import MESSAGES, GenerationError, GenerationErrorKind, ImageDecodeError
from headshot_studio.imaging import finalize_image, optimize_image, transform
from headshot_studio.models import (
    AttemptOutcome,
    FallbackAttempt,
    GenerationRequest,
    GenerationResult,
    OptimizedImage,
)
from headshot_studio.styles import lookup

logger = logging.getLogger(__name__)

LOCAL_TIER = "local"


class State(str, Enum):
    NOT_STARTED = "not_started"
    TRYING_PRIMARY = "trying_primary"
    TRYING_SECONDARY = "trying_secondary"
    TRYING_LOCAL = "trying_local"
    DONE = "done"


_NEXT_STATE = {
    State.TRYING_PRIMARY: State.TRYING_SECONDARY,
    State.TRYING_SECONDARY: State.TRYING_LOCAL,
}


class GenerationOrchestrator:
    def __init__(
        self,
        settings: Settings,
        primary: Optional[RemoteTier] = None,
        secondary: Optional[RemoteTier] = None,
        executor: Optional[Executor] = None,
    ):
        self.settings = settings
        self.remote_tiers: Dict[State, RemoteTier] = {
            State.TRYING_PRIMARY: primary or PrimaryGenerationClient(settings),
            State.TRYING_SECONDARY: secondary or SecondaryGenerationClient(settings),
        }
        self._executor = executor
        self._owns_executor = executor is None
        self._executor_lock = threading.Lock()

    @property
    def executor(self) -> Executor:
        with self._executor_lock:
            if self._executor is None:
                workers = self.settings.local_workers or os.cpu_count() or 1
                self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="local-style")
            return self._executor

    def close(self) -> None:
        if not self._owns_executor:
            return
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def operate(self, request: GenerationRequest) -> GenerationResult:
        start = time.perf_counter()
        attempts: List[FallbackAttempt] = []

        if not self.settings.configured:
            logger.error("GEMINI_API_KEY not set in environment for process PID=%s", os.getpid())
            return self._failure(start, GenerationErrorKind.UNCONFIGURED, attempts)

        profile = lookup(request.style)
        optimized = optimize_image(request.image_bytes, request.mime_type)
        deadline = Deadline(self.settings.request_deadline)

        state = State.TRYING_PRIMARY
        image_bytes: Optional[bytes] = None
        tier_name: Optional[str] = None
        while state is not State.DONE:
            if state is State.TRYING_LOCAL:
                image_bytes = self._run_local(optimized.data, profile.key)
                attempts.append(FallbackAttempt(LOCAL_TIER, AttemptOutcome.IMAGE_FOUND))
                tier_name = LOCAL_TIER
                state = State.DONE
                continue

            tier = self.remote_tiers[state]
            try:
                image_bytes = self._run_remote(tier, optimized, profile.directive, deadline)
            except GenerationError as e:
                if e.kind is GenerationErrorKind.UNCONFIGURED:
                    logger.error("%s tier reports missing credential, aborting", tier.name)
                    return self._failure(start, e.kind, attempts)
                logger.warning("%s tier failed (%s): %s", tier.name, e.kind.value, e.detail or e)
                attempts.append(FallbackAttempt(tier.name, AttemptOutcome.FAILED, e.kind, e.detail or str(e)))
                state = _NEXT_STATE[state]
                continue

            if image_bytes is None:
                logger.info("%s tier returned no image, falling back", tier.name)
                attempts.append(
                    FallbackAttempt(tier.name, AttemptOutcome.NO_IMAGE, GenerationErrorKind.NO_IMAGE_IN_RESPONSE)
                )
                state = _NEXT_STATE[state]
                continue

            attempts.append(FallbackAttempt(tier.name, AttemptOutcome.IMAGE_FOUND))
            tier_name = tier.name
            state = State.DONE

        elapsed = round(time.perf_counter() - start, 2)
        logger.info("generation done style=%s tier=%s time=%.2fs", profile.key, tier_name, elapsed)
        return GenerationResult(
            success=True,
            image_bytes=image_bytes,
            processing_time=elapsed,
            tier=tier_name,
            attempts=attempts,
        )

    def _run_remote(
        self, tier: RemoteTier, image: OptimizedImage, directive: str, deadline: Deadline
    ) -> Optional[bytes]:
        try:
            extraction = tier.invoke(image, directive, deadline)
        except GenerationError:
            raise
        except Exception as e:
            logger.exception("%s tier raised an unclassified error", tier.name)
            raise GenerationError(GenerationErrorKind.UNKNOWN, str(e)) from e

        if extraction.payload is None:
            return None
        try:
            return finalize_image(extraction.payload.data)
        except ImageDecodeError as e:
            raise GenerationError(GenerationErrorKind.UNKNOWN, f"model image undecodable: {e}") from e

    def _run_local(self, data: bytes, style: str) -> bytes:
        try:
            future = self.executor.submit(transform, data, style)
        except RuntimeError:
            # Pool already shut down (process exiting); do the work inline.
            return transform(data, style)
        return future.result()

    def _failure(
        self, start: float, kind: GenerationErrorKind, attempts: List[FallbackAttempt]
    ) -> GenerationResult:
        return GenerationResult(
            success=False,
            processing_time=round(time.perf_counter() - start, 2),
            error_kind=kind,
            error_message=MESSAGES[kind],
            attempts=attempts,
        )
