"""
Security utilities - API key format checks and secret redaction.

The Gemini API key is an opaque credential owned by the visitor (or by the
server configuration as a fallback). The application never inspects it beyond
a structural format check, and it must never reach a log line.
"""

import re
from typing import Any, Dict, Optional

# ---------------------------------------------------------------------------
# API KEY FORMAT
# ---------------------------------------------------------------------------
# Gemini keys usually start with "AIza" and are 39 characters long.
# The check is deliberately loose so that new key formats keep working.
API_KEY_MIN_LENGTH = 30
API_KEY_MAX_LENGTH = 50
_API_KEY_CHARSET = re.compile(r"^[A-Za-z0-9_-]+$")

# Anything that looks like a Google API key inside free text
_GOOGLE_API_KEY_PATTERN = re.compile(r"AIza[0-9A-Za-z_-]{20,}")

REDACTED = "[REDACTED]"

# Metadata keys whose values are always scrubbed before logging
SENSITIVE_KEYS = frozenset({
    "api_key",
    "apikey",
    "key",
    "token",
    "credential",
    "password",
    "secret",
    "x-goog-api-key",
})


def validate_api_key_format(api_key: Optional[str]) -> bool:
    """
    Check the structure of an API key without contacting the API.

    Args:
        api_key: The candidate key

    Returns:
        True if the key has a plausible length and only uses [A-Za-z0-9_-]
    """
    if not isinstance(api_key, str):
        return False

    return (
        API_KEY_MIN_LENGTH <= len(api_key) <= API_KEY_MAX_LENGTH
        and _API_KEY_CHARSET.match(api_key) is not None
    )


def redact_secret(text: str, secret: Optional[str]) -> str:
    """Replace every occurrence of a concrete secret in text."""
    if not text or not secret:
        return text
    return text.replace(secret, REDACTED)


def redact_api_keys(text: str) -> str:
    """Mask anything shaped like a Google API key."""
    if not text:
        return text
    return _GOOGLE_API_KEY_PATTERN.sub(REDACTED, text)


def sanitize_metadata(metadata: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Return a copy of log metadata with sensitive values removed.

    Nested dictionaries are sanitized recursively, string values are passed
    through redact_api_keys().
    """
    if metadata is None:
        return None

    clean: Dict[str, Any] = {}
    for name, value in metadata.items():
        if name.lower() in SENSITIVE_KEYS:
            clean[name] = REDACTED
        elif isinstance(value, dict):
            clean[name] = sanitize_metadata(value)
        elif isinstance(value, str):
            clean[name] = redact_api_keys(value)
        else:
            clean[name] = value
    return clean
