"""
Page Generator Service - Orchestrates the generation of one page.

Pipeline per request:
=====================
    IDLE -> CREDENTIAL_RESOLVED -> PROMPT_ASSEMBLED -> REQUESTING -> SUCCEEDED | FAILED

1. The credential is resolved and the client built once, when the service is
   constructed. A missing or malformed key is remembered as a failure and
   returned by every call without touching the network.
2. The prompt is assembled from flavor, URL and query parameters.
3. The generation client is called. Its errors are passed through unchanged,
   so callers can rely on the INVALID_API_KEY sentinel.
4. Successful output is post-processed (fences, images, links).

Usage:
======
    service = PageGeneratorService(api_key="AIza...")
    result = await service.generate_page(SlugData.from_path("/blog/post"), "retro")
"""

import logging
import random
from enum import Enum
from typing import Callable, Optional
from uuid import uuid4

from urlverse.ai.flavors import FlavorRegistry, flavor_registry
from urlverse.ai.monitoring import ai_logger, performance_monitor
from urlverse.ai.monitoring.metrics import PerformanceMonitor
from urlverse.ai.prompts import assemble_prompt, build_parameter_context
from urlverse.ai.providers.base import (
    GenerationErrorKind,
    GenerationResult,
    TextGenerationClient,
)
from urlverse.ai.providers.gemini import GeminiClient
from urlverse.core.security import validate_api_key_format
from urlverse.services.content_processor import process_content
from urlverse.services.page_context import GenerationContext, SlugData

logger = logging.getLogger("urlverse.services.page_generator")


MISSING_CREDENTIAL_MESSAGE = (
    "No API key found. Please enter your Gemini API key in the settings."
)
MALFORMED_CREDENTIAL_MESSAGE = (
    "Invalid API key format. Please check your Gemini API key in the settings."
)
EMPTY_PAGE_MESSAGE = "The generated page was empty."


class PageGenerationState(str, Enum):
    """Lifecycle of a single generation request."""
    IDLE = "idle"
    CREDENTIAL_RESOLVED = "credential_resolved"
    PROMPT_ASSEMBLED = "prompt_assembled"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PageGeneratorService:
    """
    Turns a GenerationContext into processed HTML or a classified error.

    The instance holds no per-request state, so one service may serve
    concurrent requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        credential_provider: Optional[Callable[[], Optional[str]]] = None,
        client: Optional[TextGenerationClient] = None,
        client_factory: Optional[Callable[[str], TextGenerationClient]] = None,
        registry: FlavorRegistry = flavor_registry,
        monitor: Optional[PerformanceMonitor] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            api_key: Explicit credential (wins over credential_provider)
            credential_provider: Callable returning the credential
            client: Pre-built client, skips credential resolution
            client_factory: Builds a client from a validated credential
                (defaults to GeminiClient)
            registry: Flavor lookup table
            monitor: Performance monitor for timings
            rng: Random source for placeholder images
        """
        self._registry = registry
        self._monitor = monitor or performance_monitor
        self._rng = rng
        self._client: Optional[TextGenerationClient] = None
        self._credential_failure: Optional[GenerationResult] = None

        if client is not None:
            self._client = client
            return

        credential = api_key or (credential_provider() if credential_provider else None)

        if not credential:
            logger.warning("No Gemini API key available, page generation disabled")
            self._credential_failure = GenerationResult.failure(
                MISSING_CREDENTIAL_MESSAGE, GenerationErrorKind.MISSING_CREDENTIAL
            )
        elif not validate_api_key_format(credential):
            logger.warning("Gemini API key has an invalid format, page generation disabled")
            self._credential_failure = GenerationResult.failure(
                MALFORMED_CREDENTIAL_MESSAGE, GenerationErrorKind.MALFORMED_CREDENTIAL
            )
        else:
            factory = client_factory or GeminiClient
            self._client = factory(credential)

    @property
    def client(self) -> Optional[TextGenerationClient]:
        return self._client

    @property
    def is_ready(self) -> bool:
        """True when a client is available."""
        return self._client is not None

    # -------------------------------------------------------------------------
    # PUBLIC ENTRY POINTS
    # -------------------------------------------------------------------------

    async def generate_page(
        self,
        slug_data: SlugData,
        flavor_id: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a page for parsed URL data in the given flavor."""
        flavor = self._registry.get_by_id(flavor_id)
        context = GenerationContext.from_slug(slug_data, flavor.id)
        return await self.generate(context)

    async def generate_page_with_context(self, context: GenerationContext) -> GenerationResult:
        """Generate a page for a pre-built context."""
        return await self.generate(context)

    async def generate(self, context: GenerationContext) -> GenerationResult:
        """
        Run the pipeline for one request.

        Never raises (except for task cancellation); every failure is
        returned as a GenerationResult.
        """
        request_id = uuid4().hex[:12]
        self._transition(request_id, PageGenerationState.IDLE, query=context.query)

        with self._monitor.measure(
            "page_generation", query=context.query, flavor=context.flavor_id
        ) as outcome:
            result = await self._run(request_id, context)
            outcome["success"] = result.success

        return result

    # -------------------------------------------------------------------------
    # PIPELINE
    # -------------------------------------------------------------------------

    async def _run(self, request_id: str, context: GenerationContext) -> GenerationResult:
        if self._credential_failure is not None:
            self._transition(request_id, PageGenerationState.FAILED,
                             error_kind=self._credential_failure.error_kind.value)
            return GenerationResult.failure(
                self._credential_failure.error, self._credential_failure.error_kind
            )

        self._transition(request_id, PageGenerationState.CREDENTIAL_RESOLVED)

        try:
            prompt = assemble_prompt(
                context.query,
                build_parameter_context(context.params),
                context.flavor_id,
                registry=self._registry,
            )
            self._transition(request_id, PageGenerationState.PROMPT_ASSEMBLED,
                             prompt_length=len(prompt))

            self._transition(request_id, PageGenerationState.REQUESTING)
            with self._monitor.measure("api_call", model=self._client.model) as call:
                result = await self._client.generate(prompt)
                call["success"] = result.success

            if not result.success:
                self._transition(request_id, PageGenerationState.FAILED,
                                 error_kind=result.error_kind.value if result.error_kind else None)
                return result

            with self._monitor.measure("content_processing", length=len(result.content)):
                content = process_content(result.content, context.params, rng=self._rng)

            if not content.strip():
                self._transition(request_id, PageGenerationState.FAILED,
                                 error_kind=GenerationErrorKind.EMPTY_GENERATION.value)
                return GenerationResult.failure(
                    EMPTY_PAGE_MESSAGE,
                    GenerationErrorKind.EMPTY_GENERATION,
                    latency_ms=result.latency_ms,
                )

            self._transition(request_id, PageGenerationState.SUCCEEDED,
                             content_length=len(content))
            return GenerationResult.ok(content, usage=result.usage, latency_ms=result.latency_ms)

        except Exception as e:
            logger.exception("Page generation failed unexpectedly")
            ai_logger.log_error(
                request_id=request_id,
                error=str(e),
                stage="page_generation",
                metadata={"query": context.query, "flavor": context.flavor_id},
            )
            self._transition(request_id, PageGenerationState.FAILED,
                             error_kind=GenerationErrorKind.INTERNAL_ERROR.value)
            return GenerationResult.failure(
                f"Unexpected error while generating the page: {e}",
                GenerationErrorKind.INTERNAL_ERROR,
            )

    def _transition(self, request_id: str, state: PageGenerationState, **data) -> None:
        ai_logger.log_event(
            request_id,
            "page_generation_state",
            {"state": state.value, **data},
            level=logging.DEBUG,
        )
