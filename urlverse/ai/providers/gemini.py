"""
Gemini Client - Google Gemini generateContent over REST.

Talks to the v1beta REST endpoint directly with httpx instead of the SDK:
the visitor's key travels in the x-goog-api-key header per request, and the
raw HTTP status and error body are needed to classify failures.

Error classification:
=====================
- 401/403 or a credential reason in error.details -> INVALID_API_KEY sentinel
- 429                                              -> rate-limit message
- any other non-2xx                                -> "HTTP error <status>"
- 2xx without text                                 -> "No content returned by the API."
- network problems / non-JSON body                 -> transport failure

generate() never raises.
"""

import logging
import time
from typing import Any, Dict, Optional
from uuid import uuid4

import httpx

from urlverse.core.config import settings
from urlverse.core.security import redact_secret
from urlverse.ai.monitoring.logger import AILogger, ai_logger as default_ai_logger
from urlverse.ai.providers.base import (
    INVALID_API_KEY,
    GenerationErrorKind,
    GenerationResult,
    TextGenerationClient,
    TokenUsage,
)

logger = logging.getLogger("urlverse.ai.gemini")


# error.details[].reason values that mean the key itself is the problem
CREDENTIAL_FAILURE_REASONS = frozenset({
    "API_KEY_INVALID",
    "API_KEY_SERVICE_BLOCKED",
})

RATE_LIMIT_MESSAGE = "API rate limit reached. Please try again later."
EMPTY_GENERATION_MESSAGE = "No content returned by the API."
INVALID_RESPONSE_MESSAGE = "Invalid response from the API."

OPERATION = "generateContent"


class GeminiClient(TextGenerationClient):
    """
    Text generation client for the Gemini REST API.

    Usage:
        client = GeminiClient(api_key="AIza...")
        result = await client.generate(prompt)

    An httpx.AsyncClient can be injected to share a connection pool (or a
    MockTransport in tests). Without one, a short-lived client is opened
    per call.
    """

    provider_name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        ai_logger: Optional[AILogger] = None,
    ):
        if not api_key:
            raise ValueError("GeminiClient requires an API key")

        self._api_key = api_key
        self.model = model or settings.GEMINI_MODEL
        self.api_base = (api_base or settings.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.AI_REQUEST_TIMEOUT
        self._http_client = http_client
        self._ai_logger = ai_logger or default_ai_logger

        logger.info(f"Gemini client initialized with model: {self.model}")

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:{OPERATION}"

    def _get_headers(self) -> Dict[str, str]:
        # Credential goes in a header, never in the URL
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

    async def generate(self, prompt: str) -> GenerationResult:
        request_id = uuid4().hex[:12]
        start_time = time.time()

        self._ai_logger.log_request(
            request_id=request_id,
            prompt=prompt,
            provider=self.provider_name,
            model=self.model,
        )

        body = {"contents": [{"parts": [{"text": prompt}]}]}
        status_code: Optional[int] = None

        try:
            response = await self._post(body)
            status_code = response.status_code
            result = self._parse_response(response, self._measure_latency(start_time))

        except httpx.TimeoutException:
            result = GenerationResult.failure(
                f"The generation API did not respond within {self.timeout:g} seconds.",
                GenerationErrorKind.TRANSPORT_FAILURE,
                latency_ms=self._measure_latency(start_time),
            )
        except httpx.HTTPError as e:
            result = GenerationResult.failure(
                f"Network error: {self._redact(str(e))}",
                GenerationErrorKind.TRANSPORT_FAILURE,
                latency_ms=self._measure_latency(start_time),
            )
        except Exception as e:
            logger.exception("Unexpected error during Gemini request")
            result = GenerationResult.failure(
                f"Unexpected error: {self._redact(str(e))}",
                GenerationErrorKind.TRANSPORT_FAILURE,
                latency_ms=self._measure_latency(start_time),
            )

        self._log_outcome(request_id, result, status_code)
        return result

    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self.endpoint,
                headers=self._get_headers(),
                json=body,
                timeout=self.timeout,
            )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(
                self.endpoint,
                headers=self._get_headers(),
                json=body,
            )

    # -------------------------------------------------------------------------
    # RESPONSE HANDLING
    # -------------------------------------------------------------------------

    def _parse_response(self, response: httpx.Response, latency_ms: float) -> GenerationResult:
        if not response.is_success:
            return self._classify_error(response, latency_ms)

        try:
            data = response.json()
        except ValueError:
            return GenerationResult.failure(
                INVALID_RESPONSE_MESSAGE,
                GenerationErrorKind.TRANSPORT_FAILURE,
                latency_ms=latency_ms,
            )

        text = self._extract_text(data)
        if not text:
            return GenerationResult.failure(
                EMPTY_GENERATION_MESSAGE,
                GenerationErrorKind.EMPTY_GENERATION,
                latency_ms=latency_ms,
            )

        return GenerationResult.ok(
            content=text,
            usage=self._extract_usage(data),
            latency_ms=latency_ms,
        )

    def _classify_error(self, response: httpx.Response, latency_ms: float) -> GenerationResult:
        status = response.status_code
        message, reasons = self._read_error_body(response)

        # Credential problems win over every other classification
        if status in (401, 403) or reasons & CREDENTIAL_FAILURE_REASONS:
            return GenerationResult.failure(
                INVALID_API_KEY,
                GenerationErrorKind.CREDENTIAL_REJECTED,
                latency_ms=latency_ms,
            )

        if status == 429:
            return GenerationResult.failure(
                RATE_LIMIT_MESSAGE,
                GenerationErrorKind.RATE_LIMITED,
                latency_ms=latency_ms,
            )

        error = f"HTTP error {status}"
        if message:
            error = f"{error}: {self._redact(message)}"
        return GenerationResult.failure(
            error,
            GenerationErrorKind.TRANSPORT_FAILURE,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _read_error_body(response: httpx.Response):
        """Return (error.message, {error.details[].reason}) from an error body."""
        try:
            data = response.json()
        except ValueError:
            return None, frozenset()

        error = data.get("error") if isinstance(data, dict) else None
        if not isinstance(error, dict):
            return None, frozenset()

        message = error.get("message") if isinstance(error.get("message"), str) else None
        details = error.get("details")
        reasons = frozenset(
            detail["reason"]
            for detail in (details if isinstance(details, list) else [])
            if isinstance(detail, dict) and isinstance(detail.get("reason"), str)
        )
        return message, reasons

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        """candidates[0].content.parts[0].text, or None."""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) else None

    @staticmethod
    def _extract_usage(data: Dict[str, Any]) -> TokenUsage:
        usage = data.get("usageMetadata") or {}
        return TokenUsage(
            prompt_tokens=usage.get("promptTokenCount", 0) or 0,
            completion_tokens=usage.get("candidatesTokenCount", 0) or 0,
            total_tokens=usage.get("totalTokenCount", 0) or 0,
        )

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------

    def _redact(self, text: str) -> str:
        return redact_secret(text, self._api_key)

    def _log_outcome(self, request_id: str, result: GenerationResult, status_code: Optional[int]) -> None:
        if result.success:
            self._ai_logger.log_response(
                request_id=request_id,
                result=result,
                provider=self.provider_name,
                model=self.model,
            )
        elif result.credential_rejected:
            # Expected and user-actionable, not an error
            self._ai_logger.log_event(
                request_id,
                "credential_rejected",
                {"status_code": status_code, "model": self.model},
            )
        else:
            self._ai_logger.log_error(
                request_id=request_id,
                error=self._redact(result.error or ""),
                stage="api_call",
                metadata={
                    "operation": OPERATION,
                    "model": self.model,
                    "status_code": status_code,
                    "error_kind": result.error_kind.value if result.error_kind else None,
                    "latency_ms": round(result.latency_ms, 2),
                },
            )
