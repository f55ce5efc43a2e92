"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export GEMINI_API_KEY=AIza...
        export DEFAULT_FLAVOR=retro
        export ENABLED_FLAVORS='["retro", "minimalist"]'
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file in project root
        env_file_encoding="utf-8",
        extra="ignore",         # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs, page titles and logging
    APP_NAME: str = "URLverse"

    # DEBUG: Enable debug mode (more verbose errors, auto-reload in dev)
    DEBUG: bool = False

    # LOG_LEVEL: Level for the "urlverse" logger hierarchy
    LOG_LEVEL: str = "INFO"

    # ---------------------------------------------------------------------------
    # GEMINI SETTINGS
    # ---------------------------------------------------------------------------
    # GEMINI_API_KEY: Server-wide fallback key.
    # - Visitors normally bring their own key (header or cookie)
    # - Leave empty to force every visitor to configure one
    GEMINI_API_KEY: str = ""

    # GEMINI_MODEL: Model used for page generation
    GEMINI_MODEL: str = "gemini-2.5-flash-lite"

    # GEMINI_API_BASE: REST base URL, the model path is appended to it
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"

    # AI Request timeout in seconds
    AI_REQUEST_TIMEOUT: float = 30.0

    # ---------------------------------------------------------------------------
    # FLAVOR SETTINGS
    # ---------------------------------------------------------------------------
    # DEFAULT_FLAVOR: Used when no (valid) flavor was requested
    DEFAULT_FLAVOR: str = "parallelverse"

    # ENABLED_FLAVORS: Allow-list of selectable flavors.
    # A flavor can be disabled here without removing its definition.
    ENABLED_FLAVORS: List[str] = [
        "parallelverse",
        "realistic",
        "cyberpunk",
        "retro",
        "minimalist",
    ]

    # ---------------------------------------------------------------------------
    # COOKIE SETTINGS
    # ---------------------------------------------------------------------------
    API_KEY_COOKIE_NAME: str = "urlverse_api_key"
    FLAVOR_COOKIE_NAME: str = "flavor"
    PREFERENCES_COOKIE_NAME: str = "urlverse_preferences"

    # COOKIE_SECURE: Only send cookies over HTTPS (disable for local http dev)
    COOKIE_SECURE: bool = True

    API_KEY_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30  # 30 days
    PREFERENCES_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 365  # 1 year


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from urlverse.core.config import settings
settings = Settings()
