"""
AI Providers Module - Clients for the page generation backend.

Every client implements the same interface:
    result = await client.generate(prompt)

Currently only Google Gemini is supported; the orchestrator depends on
TextGenerationClient so tests and future backends can be swapped in.
"""

from urlverse.ai.providers.base import (
    INVALID_API_KEY,
    GenerationErrorKind,
    GenerationResult,
    TextGenerationClient,
    TokenUsage,
)
from urlverse.ai.providers.gemini import GeminiClient

__all__ = [
    "INVALID_API_KEY",
    "GenerationErrorKind",
    "GenerationResult",
    "TextGenerationClient",
    "TokenUsage",
    "GeminiClient",
]
