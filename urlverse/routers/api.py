"""
API Router - JSON endpoints for page generation and visitor settings.

Endpoints:
==========
- GET    /api/flavors               -> enabled flavors + default
- POST   /api/generate              -> generate a page as JSON
- PUT    /api/settings/api-key      -> store the visitor's Gemini key (cookie)
- DELETE /api/settings/api-key      -> forget the key
- PUT    /api/settings/flavor       -> remember a flavor (cookie)
- GET    /api/settings/preferences  -> read preferences cookie
- PUT    /api/settings/preferences  -> write preferences cookie
- GET    /api/metrics               -> timing report of the pipeline
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from urlverse.ai.flavors import flavor_registry
from urlverse.ai.monitoring import performance_monitor
from urlverse.deps import get_page_generator, get_preference_store, http_status_for
from urlverse.schemas.generation import (
    ApiKeyUpdate,
    FlavorListResponse,
    FlavorOption,
    FlavorUpdate,
    GenerateRequest,
    GenerateResponse,
    SettingsResponse,
)
from urlverse.schemas.preferences import UserPreferences
from urlverse.services.page_context import SlugData
from urlverse.services.page_generator import PageGeneratorService
from urlverse.services.preferences import PreferenceStore

logger = logging.getLogger("urlverse.routers.api")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/api", tags=["api"])


# ---------------------------------------------------------------------------
# FLAVORS
# ---------------------------------------------------------------------------

@router.get("/flavors", response_model=FlavorListResponse)
def list_flavors():
    """Enabled flavors in display order."""
    return FlavorListResponse(
        default=flavor_registry.default_id,
        flavors=[FlavorOption(**option) for option in flavor_registry.get_options()],
    )


# ---------------------------------------------------------------------------
# GENERATION
# ---------------------------------------------------------------------------

@router.post("/generate", response_model=GenerateResponse)
async def generate_page(
    body: GenerateRequest,
    request: Request,
    response: Response,
    generator: PageGeneratorService = Depends(get_page_generator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """
    Generate a page and return it as JSON.

    Failures keep the JSON shape; the HTTP status tells the class of error:
    401 credential, 429 rate limit, 502 anything else.
    """
    if flavor_registry.is_enabled(body.flavor):
        flavor_id = body.flavor
    else:
        flavor_id = store.resolve_flavor(request)

    slug_data = SlugData.from_path(body.path, body.params)
    result = await generator.generate_page(slug_data, flavor_id)

    response.status_code = http_status_for(result)
    if not result.success:
        error_kind = result.error_kind.value if result.error_kind else None
        logger.info(f"Generation for '/{slug_data.query}' failed: {error_kind}")

    return GenerateResponse(
        content=result.content,
        error=result.error,
        error_kind=result.error_kind,
        credential_rejected=result.credential_rejected,
        flavor=flavor_id,
    )


# ---------------------------------------------------------------------------
# SETTINGS
# ---------------------------------------------------------------------------

@router.put("/settings/api-key", response_model=SettingsResponse)
def set_api_key(
    body: ApiKeyUpdate,
    response: Response,
    store: PreferenceStore = Depends(get_preference_store),
):
    """Validate the key's format and store it in an HttpOnly cookie."""
    try:
        store.set_api_key(response, body.api_key)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid API key format. Gemini keys are 30-50 characters of letters, digits, '-' and '_'.",
        )
    return SettingsResponse(message="API key saved.")


@router.delete("/settings/api-key", response_model=SettingsResponse)
def clear_api_key(
    response: Response,
    store: PreferenceStore = Depends(get_preference_store),
):
    store.clear_api_key(response)
    return SettingsResponse(message="API key removed.")


@router.put("/settings/flavor", response_model=SettingsResponse)
def set_flavor(
    body: FlavorUpdate,
    response: Response,
    store: PreferenceStore = Depends(get_preference_store),
):
    try:
        store.set_flavor(response, body.flavor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return SettingsResponse(message=f"Flavor set to {body.flavor}.")


@router.get("/settings/preferences", response_model=UserPreferences)
def get_preferences(
    request: Request,
    store: PreferenceStore = Depends(get_preference_store),
):
    return store.get_preferences(request)


@router.put("/settings/preferences", response_model=UserPreferences)
def set_preferences(
    body: UserPreferences,
    response: Response,
    store: PreferenceStore = Depends(get_preference_store),
):
    if body.default_flavor is not None and not flavor_registry.is_enabled(body.default_flavor):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown or disabled flavor: {body.default_flavor}",
        )
    store.set_preferences(response, body)
    return body


# ---------------------------------------------------------------------------
# METRICS
# ---------------------------------------------------------------------------

@router.get("/metrics")
def get_metrics():
    """Aggregated pipeline timings per operation."""
    return performance_monitor.get_report()
