"""Headshot Studio: style-transfer headshots with a guaranteed local fallback."""

from headshot_studio.config import Settings
from headshot_studio.models import GenerationRequest, GenerationResult
from headshot_studio.orchestrator import GenerationOrchestrator

__all__ = ["GenerationOrchestrator", "GenerationRequest", "GenerationResult", "Settings"]
