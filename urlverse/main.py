"""
Main application entry point - FastAPI app instance and configuration.
This is where the ASGI application is created and configured.
Run with: uvicorn urlverse.main:app --reload
"""

import logging

from fastapi import FastAPI  # The FastAPI framework

from urlverse.core.config import settings  # Application settings
from urlverse.ai.monitoring import ai_logger  # noqa: F401  (configures the "urlverse" log handler)
from urlverse.routers import api, pages  # Route handlers

logger = logging.getLogger("urlverse.main")

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
# - title: Shown in the automatic API documentation (Swagger UI)
# - docs_url / redoc_url: registered before the catch-all page route,
#   so they keep working
app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
# Registered before the page router: GET /{path:path} would swallow it.
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Does NOT contact the Gemini API (that would cost quota on every probe).

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# api.router: /api/* JSON endpoints
# pages.router: /, /go and the catch-all page generator (must be last)
app.include_router(api.router)
app.include_router(pages.router)

logger.info(f"{settings.APP_NAME} started (model: {settings.GEMINI_MODEL}, default flavor: {settings.DEFAULT_FLAVOR})")
