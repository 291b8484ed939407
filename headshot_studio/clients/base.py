"""
Base class for remote generation tiers.
"""
from headshot_studio.deadline import Deadline
from headshot_studio.errors import GenerationError, GenerationErrorKind
from headshot_studio.extraction import Extraction
from headshot_studio.models import OptimizedImage


class RemoteTier:
    """One remote strategy in the fallback chain."""

    name = "remote"

    def invoke(self, image: OptimizedImage, directive: str, deadline: Deadline) -> Extraction:
        """
        Submit ``directive`` plus ``image`` to the model.

        Returns the extraction of the response; ``NoImage`` is a valid
        outcome, not an error. Transport and HTTP failures are raised as
        ``GenerationError`` with a classified kind.
        """
        raise NotImplementedError("Subclasses must implement invoke")

    def _ensure_time_left(self, deadline: Deadline) -> None:
        if deadline.expired:
            raise GenerationError(
                GenerationErrorKind.REMOTE_UNAVAILABLE,
                f"request deadline exhausted before {self.name} call",
            )
