"""Generative language service clients."""

from orgwatch.generation.base import (
    ANALYSIS_PARAMS,
    DIRECT_PARAMS,
    SUMMARY_PARAMS,
    SYNTHESIS_PARAMS,
    GenerationParams,
    TextGenerator,
)
from orgwatch.generation.claude import ClaudeTextGenerator

__all__ = [
    "ANALYSIS_PARAMS",
    "DIRECT_PARAMS",
    "SUMMARY_PARAMS",
    "SYNTHESIS_PARAMS",
    "ClaudeTextGenerator",
    "GenerationParams",
    "TextGenerator",
]
