"""Async pipelines that call the synthesis service and commit results."""

from .batch import BatchTryOnOrchestrator
from .drafts import DraftPipeline
from .synthesis import DISPLAY_NAME_LENGTH, SynthesisPipeline, display_name_for

__all__ = [
    "BatchTryOnOrchestrator",
    "DISPLAY_NAME_LENGTH",
    "DraftPipeline",
    "SynthesisPipeline",
    "display_name_for",
]
