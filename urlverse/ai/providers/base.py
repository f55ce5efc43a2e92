"""
Base Generation Client - Contract between the page pipeline and LLM backends.

This module defines the result type every text-generation client returns and
the abstract interface the page generator depends on.

Design Pattern: Strategy Pattern
================================
The orchestrator only knows TextGenerationClient. Tests inject a fake client,
production uses GeminiClient.

Example:
    client = GeminiClient(api_key="AIza...")
    result = await client.generate("Create a page for /blog")
    if result.success:
        print(result.content)
    elif result.error == INVALID_API_KEY:
        ask_for_a_new_key()
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


# Sentinel error string for a rejected credential.
# Callers match it by exact equality, never by substring.
INVALID_API_KEY = "INVALID_API_KEY"


class GenerationErrorKind(str, Enum):
    """Failure taxonomy of a generation call."""
    MISSING_CREDENTIAL = "missing_credential"
    MALFORMED_CREDENTIAL = "malformed_credential"
    CREDENTIAL_REJECTED = "credential_rejected"
    RATE_LIMITED = "rate_limited"
    TRANSPORT_FAILURE = "transport_failure"
    EMPTY_GENERATION = "empty_generation"
    INTERNAL_ERROR = "internal_error"

    @property
    def is_credential_problem(self) -> bool:
        """Failures the visitor fixes by entering another key."""
        return self in (
            GenerationErrorKind.MISSING_CREDENTIAL,
            GenerationErrorKind.MALFORMED_CREDENTIAL,
            GenerationErrorKind.CREDENTIAL_REJECTED,
        )


@dataclass
class TokenUsage:
    """
    Token usage statistics for a generation request.

    Filled from the `usageMetadata` block of the Gemini response when the
    API reports it, otherwise all zero.
    """
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        """Calculate total if not provided."""
        if self.total_tokens == 0:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class GenerationResult:
    """
    Outcome of a page generation.

    Exactly one of `content` (non-empty HTML) or `error` is meaningful.
    Clients and the orchestrator never raise; every failure ends up here.

    Attributes:
        content: The generated (and, after the orchestrator, processed) HTML
        error: Human-readable error message, or INVALID_API_KEY
        error_kind: Machine-readable failure class
        usage: Token usage statistics
        latency_ms: How long the request took
    """
    content: str = ""
    error: Optional[str] = None
    error_kind: Optional[GenerationErrorKind] = None
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None and bool(self.content)

    @property
    def credential_rejected(self) -> bool:
        """True only for the sentinel error."""
        return self.error == INVALID_API_KEY

    @classmethod
    def ok(
        cls,
        content: str,
        usage: Optional[TokenUsage] = None,
        latency_ms: float = 0.0,
    ) -> "GenerationResult":
        return cls(
            content=content,
            usage=usage or TokenUsage(),
            latency_ms=latency_ms,
        )

    @classmethod
    def failure(
        cls,
        error: str,
        kind: GenerationErrorKind,
        latency_ms: float = 0.0,
    ) -> "GenerationResult":
        return cls(content="", error=error, error_kind=kind, latency_ms=latency_ms)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "content_length": len(self.content),
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "tokens": {
                "prompt": self.usage.prompt_tokens,
                "completion": self.usage.completion_tokens,
                "total": self.usage.total_tokens,
            },
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
        }


class TextGenerationClient(ABC):
    """
    Abstract base class for text generation backends.

    Responsibilities:
    - Send one prompt, receive one text
    - Classify every failure into a GenerationResult
    - Track token usage and latency
    """

    provider_name: str = "unknown"
    model: str = ""

    @abstractmethod
    async def generate(self, prompt: str) -> GenerationResult:
        """
        Generate text for a prompt.

        Args:
            prompt: The fully assembled prompt

        Returns:
            GenerationResult with raw model text or a classified error

        Raises:
            This method should NOT raise exceptions.
            Errors are captured in GenerationResult.error
        """
        pass

    def _measure_latency(self, start_time: float) -> float:
        """Calculate latency in milliseconds."""
        return (time.time() - start_time) * 1000
