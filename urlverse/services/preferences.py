"""
Preferences - Visitor settings stored in cookies.

Cookies:
========
- urlverse_api_key:     the visitor's Gemini key (HttpOnly, 30 days)
- flavor:               last chosen flavor (1 year)
- urlverse_preferences: JSON preferences such as theme (1 year)

Resolution order for a request:
- API key:  x-goog-api-key header -> api key cookie -> GEMINI_API_KEY setting
- Flavor:   ?flavor= query param -> flavor cookie -> preferences default
            -> DEFAULT_FLAVOR (only enabled flavors are accepted)
"""

import logging
from typing import Optional
from urllib.parse import quote, unquote

from fastapi import Request, Response
from pydantic import ValidationError

from urlverse.ai.flavors import FlavorRegistry, flavor_registry
from urlverse.core.config import Settings, settings
from urlverse.core.security import validate_api_key_format
from urlverse.schemas.preferences import UserPreferences

logger = logging.getLogger("urlverse.services.preferences")

API_KEY_HEADER = "x-goog-api-key"
FLAVOR_QUERY_PARAM = "flavor"


class PreferenceStore:
    """Cookie accessors for one application configuration."""

    def __init__(
        self,
        registry: FlavorRegistry = flavor_registry,
        config: Settings = settings,
    ):
        self._registry = registry
        self._config = config

    def _set_cookie(self, response: Response, key: str, value: str, max_age: int, httponly: bool) -> None:
        response.set_cookie(
            key=key,
            value=value,
            max_age=max_age,
            path="/",
            secure=self._config.COOKIE_SECURE,
            httponly=httponly,
            samesite="lax",
        )

    # -------------------------------------------------------------------------
    # API KEY
    # -------------------------------------------------------------------------

    def get_api_key(self, request: Request) -> Optional[str]:
        """Visitor-supplied key from header or cookie."""
        api_key = request.headers.get(API_KEY_HEADER) or request.cookies.get(
            self._config.API_KEY_COOKIE_NAME
        )
        if api_key:
            api_key = api_key.strip()
        return api_key or None

    def resolve_api_key(self, request: Request) -> Optional[str]:
        """Visitor key, falling back to the server-wide key."""
        return self.get_api_key(request) or self._config.GEMINI_API_KEY or None

    def set_api_key(self, response: Response, api_key: str) -> None:
        """
        Store a key in the HttpOnly cookie.

        Raises:
            ValueError: If the key fails the format check
        """
        api_key = api_key.strip()
        if not validate_api_key_format(api_key):
            raise ValueError("Invalid API key format")

        self._set_cookie(
            response,
            self._config.API_KEY_COOKIE_NAME,
            api_key,
            max_age=self._config.API_KEY_COOKIE_MAX_AGE,
            httponly=True,
        )

    def clear_api_key(self, response: Response) -> None:
        response.delete_cookie(self._config.API_KEY_COOKIE_NAME, path="/")

    # -------------------------------------------------------------------------
    # FLAVOR
    # -------------------------------------------------------------------------

    def get_flavor(self, request: Request) -> Optional[str]:
        """Flavor from the cookie, if still enabled."""
        flavor_id = request.cookies.get(self._config.FLAVOR_COOKIE_NAME)
        return flavor_id if self._registry.is_enabled(flavor_id) else None

    def set_flavor(self, response: Response, flavor_id: str) -> None:
        """
        Remember a flavor.

        Raises:
            ValueError: If the flavor is not enabled
        """
        if not self._registry.is_enabled(flavor_id):
            raise ValueError(f"Unknown or disabled flavor: {flavor_id}")

        self._set_cookie(
            response,
            self._config.FLAVOR_COOKIE_NAME,
            flavor_id,
            max_age=self._config.PREFERENCES_COOKIE_MAX_AGE,
            httponly=False,
        )

    def resolve_flavor(self, request: Request) -> str:
        """Pick the flavor for a request (see module docstring)."""
        requested = request.query_params.get(FLAVOR_QUERY_PARAM)
        if self._registry.is_enabled(requested):
            return requested

        from_cookie = self.get_flavor(request)
        if from_cookie:
            return from_cookie

        preferred = self.get_preferences(request).default_flavor
        if self._registry.is_enabled(preferred):
            return preferred

        return self._registry.default_id

    # -------------------------------------------------------------------------
    # PREFERENCES
    # -------------------------------------------------------------------------

    def get_preferences(self, request: Request) -> UserPreferences:
        """Parse the preferences cookie, defaults on absence or garbage."""
        raw = request.cookies.get(self._config.PREFERENCES_COOKIE_NAME)
        if not raw:
            return UserPreferences()

        try:
            return UserPreferences.model_validate_json(unquote(raw))
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences cookie: {e}")
            return UserPreferences()

    def set_preferences(self, response: Response, preferences: UserPreferences) -> None:
        self._set_cookie(
            response,
            self._config.PREFERENCES_COOKIE_NAME,
            quote(preferences.model_dump_json()),
            max_age=self._config.PREFERENCES_COOKIE_MAX_AGE,
            httponly=False,
        )


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
preference_store = PreferenceStore()
