"""
Pages Router - Server-rendered HTML pages.

Endpoints:
==========
- GET /              -> home page (URL input, flavor selector, API key)
- GET /go            -> normalize a typed URL and redirect to it
- GET /{path:path}   -> generate the page for any other path

The catch-all route must stay the last route registered on the app.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from urlverse.ai.flavors import flavor_registry
from urlverse.deps import get_page_generator, get_preference_store, http_status_for
from urlverse.services.content_processor import append_query
from urlverse.services.page_context import SlugData, normalize_url_input
from urlverse.services.page_generator import PageGeneratorService
from urlverse.services.page_renderer import PageRenderer
from urlverse.services.preferences import FLAVOR_QUERY_PARAM, PreferenceStore

logger = logging.getLogger("urlverse.routers.pages")


# Browser housekeeping requests that must not trigger a generation
IGNORED_PATHS = frozenset({"favicon.ico", "robots.txt", "apple-touch-icon.png"})


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
def homepage(
    request: Request,
    store: PreferenceStore = Depends(get_preference_store),
):
    flavor_id = store.resolve_flavor(request)
    renderer = PageRenderer(flavor_id)
    return HTMLResponse(
        content=renderer.render_homepage(
            flavor_options=flavor_registry.get_options(),
            selected_flavor=flavor_id,
            has_api_key=store.resolve_api_key(request) is not None,
        )
    )


@router.get("/go")
def go_to_path(
    path: str = Query("", max_length=2048),
    flavor: Optional[str] = Query(None, max_length=64),
    store: PreferenceStore = Depends(get_preference_store),
):
    """
    Redirect a typed path to its generated page.

    An enabled flavor is carried as ?flavor= and remembered in a cookie.
    """
    target = normalize_url_input(path)

    if flavor_registry.is_enabled(flavor):
        target = append_query(target, urlencode({FLAVOR_QUERY_PARAM: flavor}))

    response = RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
    if flavor_registry.is_enabled(flavor):
        store.set_flavor(response, flavor)
    return response


@router.get("/{path:path}", response_class=HTMLResponse)
async def generated_page(
    path: str,
    request: Request,
    generator: PageGeneratorService = Depends(get_page_generator),
    store: PreferenceStore = Depends(get_preference_store),
):
    """
    Generate the page for any path.

    All query parameters, including ?flavor=, are handed to the generator
    so they end up on the page's internal links.
    """
    if path in IGNORED_PATHS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    flavor_id = store.resolve_flavor(request)
    slug_data = SlugData.from_path(path, dict(request.query_params))

    result = await generator.generate_page(slug_data, flavor_id)
    renderer = PageRenderer(flavor_id)

    if result.success:
        return HTMLResponse(content=renderer.render_generated(result.content))

    credential_problem = result.error_kind is not None and result.error_kind.is_credential_problem
    return HTMLResponse(
        content=renderer.render_error(result.error or "", credential_problem=credential_problem),
        status_code=http_status_for(result),
    )
