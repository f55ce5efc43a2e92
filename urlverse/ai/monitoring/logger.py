"""
AI Logger - Structured logging for generation requests.

Each log entry is a JSON payload embedded in the log message so that it can
be grepped in plain logs and parsed by log shippers alike.

Log Format:
==========
Each entry includes:
- Timestamp
- Request ID (for tracing)
- Provider and model
- Token usage and latency
- Success/failure status

Credentials never reach the output: every string is passed through
redact_api_keys() and metadata through sanitize_metadata().
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

from urlverse.core.config import settings
from urlverse.core.security import redact_api_keys, sanitize_metadata

if TYPE_CHECKING:
    from urlverse.ai.providers.base import GenerationResult

# Configure the application logger hierarchy ("urlverse.*")
logger = logging.getLogger("urlverse")
logger.setLevel(settings.LOG_LEVEL.upper())

# Create console handler if not exists
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


class AILogger:
    """
    Structured logger for generation requests.

    Usage:
        ai_logger = AILogger()

        ai_logger.log_request(
            request_id="abc123",
            prompt=prompt,
            provider="gemini",
            model="gemini-2.5-flash-lite",
        )
        ai_logger.log_response(request_id="abc123", result=result,
                               provider="gemini", model="gemini-2.5-flash-lite")
    """

    def __init__(self, name: str = "urlverse.ai"):
        self._logger = logging.getLogger(name)

    def _emit(self, level: int, label: str, log_data: Dict[str, Any]) -> None:
        message = redact_api_keys(json.dumps(log_data, default=str))
        self._logger.log(level, f"{label}: {message}")

    def log_request(
        self,
        request_id: str,
        prompt: str,
        provider: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an outgoing generation request.

        Only a short prompt preview is logged, the prompt itself can be long.
        """
        log_data = {
            "event": "ai_request",
            "request_id": request_id,
            "provider": provider,
            "model": model,
            "prompt_length": len(prompt),
            "prompt_preview": prompt[:100] + "..." if len(prompt) > 100 else prompt,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if metadata:
            log_data["metadata"] = sanitize_metadata(metadata)

        self._emit(logging.INFO, "AI Request", log_data)

    def log_response(
        self,
        request_id: str,
        result: "GenerationResult",
        provider: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the outcome of a generation request."""
        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "provider": provider,
            "model": model,
            "success": result.success,
            "latency_ms": round(result.latency_ms, 2),
            "tokens": {
                "prompt": result.usage.prompt_tokens,
                "completion": result.usage.completion_tokens,
                "total": result.usage.total_tokens,
            },
            "response_length": len(result.content),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if not result.success:
            log_data["error"] = result.error
            log_data["error_kind"] = result.error_kind.value if result.error_kind else None

        if metadata:
            log_data["metadata"] = sanitize_metadata(metadata)

        level = logging.INFO if result.success else logging.WARNING
        self._emit(level, "AI Response", log_data)

    def log_error(
        self,
        request_id: str,
        error: str,
        stage: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an error in the generation pipeline.

        Args:
            request_id: Request identifier
            error: Error message
            stage: Where the error occurred (api_call, page_generation, ...)
            metadata: Additional context such as status_code
        """
        log_data = {
            "event": "ai_error",
            "request_id": request_id,
            "error": error,
            "stage": stage,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if metadata:
            log_data["metadata"] = sanitize_metadata(metadata)

        self._emit(logging.ERROR, "AI Error", log_data)

    def log_event(
        self,
        request_id: str,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        level: int = logging.INFO,
    ) -> None:
        """
        Log a generic event in the pipeline.

        Args:
            request_id: Request identifier
            event_type: Type of event (credential_rejected, state_transition, ...)
            data: Event-specific data
            level: Log level (state transitions are logged at DEBUG)
        """
        if not self._logger.isEnabledFor(level):
            return

        log_data = {
            "event": event_type,
            "request_id": request_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if data:
            log_data.update(sanitize_metadata(data))

        self._emit(level, "AI Event", log_data)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_logger = AILogger()
