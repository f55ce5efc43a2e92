"""
Dependencies module - reusable FastAPI dependencies for route handlers.

The page generator is built per request from the visitor's credential
(header, cookie or server key). Tests override get_client_factory to point
the Gemini client at a mock transport.
"""

from typing import Callable, Optional

from fastapi import Depends, Request, status

from urlverse.ai.providers.base import (
    GenerationErrorKind,
    GenerationResult,
    TextGenerationClient,
)
from urlverse.ai.providers.gemini import GeminiClient
from urlverse.services.page_generator import PageGeneratorService
from urlverse.services.preferences import PreferenceStore, preference_store


def get_preference_store() -> PreferenceStore:
    return preference_store


def get_api_key(
    request: Request,
    store: PreferenceStore = Depends(get_preference_store),
) -> Optional[str]:
    """Credential for this request: header, cookie, then server setting."""
    return store.resolve_api_key(request)


def get_client_factory() -> Callable[[str], TextGenerationClient]:
    return GeminiClient


def get_page_generator(
    api_key: Optional[str] = Depends(get_api_key),
    client_factory: Callable[[str], TextGenerationClient] = Depends(get_client_factory),
) -> PageGeneratorService:
    """
    Build the page generator for this request.

    A missing or malformed key does not fail here; the service returns a
    classified failure result when asked to generate.
    """
    return PageGeneratorService(api_key=api_key, client_factory=client_factory)


# ---------------------------------------------------------------------------
# RESULT -> HTTP STATUS
# ---------------------------------------------------------------------------

def http_status_for(result: GenerationResult) -> int:
    """
    Map a generation result to an HTTP status.

    200 success, 401 credential problems, 429 rate limit, 502 otherwise.
    """
    if result.success:
        return status.HTTP_200_OK
    if result.error_kind is not None and result.error_kind.is_credential_problem:
        return status.HTTP_401_UNAUTHORIZED
    if result.error_kind == GenerationErrorKind.RATE_LIMITED:
        return status.HTTP_429_TOO_MANY_REQUESTS
    return status.HTTP_502_BAD_GATEWAY
