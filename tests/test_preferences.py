"""
Tests for cookie-backed visitor preferences.

This module tests:
- API key resolution order (header, cookie, server setting)
- Flavor resolution order and the enabled allow-list
- Cookie attributes written by the setters
- Tolerance of unreadable preference cookies
"""

from typing import Dict, Optional
from urllib.parse import quote, urlencode

import pytest
from fastapi import Request, Response

from urlverse.ai.flavors import BUILTIN_FLAVORS, FlavorRegistry
from urlverse.core.config import Settings
from urlverse.schemas.preferences import UserPreferences
from urlverse.services.preferences import PreferenceStore

from conftest import VALID_API_KEY


def make_request(
    headers: Optional[Dict[str, str]] = None,
    cookies: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
) -> Request:
    raw_headers = [(name.lower().encode(), value.encode()) for name, value in (headers or {}).items()]
    if cookies:
        cookie_header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        raw_headers.append((b"cookie", cookie_header.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": raw_headers,
        "query_string": urlencode(query or {}).encode(),
    }
    return Request(scope)


def set_cookie_headers(response: Response):
    return response.headers.getlist("set-cookie")


@pytest.fixture
def config() -> Settings:
    return Settings(_env_file=None, GEMINI_API_KEY="")


@pytest.fixture
def store(config) -> PreferenceStore:
    registry = FlavorRegistry(
        BUILTIN_FLAVORS,
        default_id="parallelverse",
        enabled_ids=["parallelverse", "cyberpunk", "retro"],
    )
    return PreferenceStore(registry, config)


class TestApiKey:
    """Tests for API key lookup and storage."""

    def test_header_wins_over_cookie(self, store):
        request = make_request(
            headers={"x-goog-api-key": VALID_API_KEY},
            cookies={"urlverse_api_key": "from-cookie"},
        )

        assert store.get_api_key(request) == VALID_API_KEY

    def test_cookie(self, store):
        request = make_request(cookies={"urlverse_api_key": VALID_API_KEY})

        assert store.get_api_key(request) == VALID_API_KEY

    def test_whitespace_is_stripped(self, store):
        request = make_request(headers={"x-goog-api-key": f"  {VALID_API_KEY} "})

        assert store.get_api_key(request) == VALID_API_KEY

    def test_none_when_absent(self, store):
        assert store.get_api_key(make_request()) is None
        assert store.resolve_api_key(make_request()) is None

    def test_server_key_is_fallback(self, store, config):
        config.GEMINI_API_KEY = "server-key"

        assert store.resolve_api_key(make_request()) == "server-key"
        assert store.resolve_api_key(make_request(headers={"x-goog-api-key": "visitor"})) == "visitor"

    def test_set_api_key_cookie_attributes(self, store):
        response = Response()

        store.set_api_key(response, f" {VALID_API_KEY} ")

        (cookie,) = set_cookie_headers(response)
        assert cookie.startswith(f"urlverse_api_key={VALID_API_KEY};")
        assert "HttpOnly" in cookie
        assert "Secure" in cookie
        assert "SameSite=lax" in cookie
        assert "Max-Age=2592000" in cookie

    def test_set_api_key_rejects_bad_format(self, store):
        response = Response()

        with pytest.raises(ValueError):
            store.set_api_key(response, "short")

        assert set_cookie_headers(response) == []

    def test_clear_api_key(self, store):
        response = Response()

        store.clear_api_key(response)

        (cookie,) = set_cookie_headers(response)
        assert cookie.startswith("urlverse_api_key=")
        assert "Max-Age=0" in cookie


class TestFlavor:
    """Tests for flavor lookup and storage."""

    def test_query_param_wins(self, store):
        request = make_request(query={"flavor": "retro"}, cookies={"flavor": "cyberpunk"})

        assert store.resolve_flavor(request) == "retro"

    def test_disabled_query_param_falls_through_to_cookie(self, store):
        request = make_request(query={"flavor": "minimalist"}, cookies={"flavor": "cyberpunk"})

        assert store.resolve_flavor(request) == "cyberpunk"

    def test_preferences_default_flavor(self, store):
        preferences = quote(UserPreferences(default_flavor="retro").model_dump_json())
        request = make_request(cookies={"urlverse_preferences": preferences})

        assert store.resolve_flavor(request) == "retro"

    def test_application_default(self, store):
        assert store.resolve_flavor(make_request()) == "parallelverse"

    def test_unknown_cookie_is_ignored(self, store):
        request = make_request(cookies={"flavor": "vaporwave"})

        assert store.get_flavor(request) is None
        assert store.resolve_flavor(request) == "parallelverse"

    def test_set_flavor_cookie_attributes(self, store):
        response = Response()

        store.set_flavor(response, "retro")

        (cookie,) = set_cookie_headers(response)
        assert cookie.startswith("flavor=retro;")
        assert "HttpOnly" not in cookie
        assert "Max-Age=31536000" in cookie

    def test_set_flavor_rejects_disabled(self, store):
        with pytest.raises(ValueError, match="minimalist"):
            store.set_flavor(Response(), "minimalist")


class TestPreferences:
    """Tests for the JSON preferences cookie."""

    def test_round_trip_through_cookie(self, store):
        response = Response()
        store.set_preferences(response, UserPreferences(theme="dark", default_flavor="cyberpunk"))
        (cookie,) = set_cookie_headers(response)
        value = cookie.split(";", 1)[0].split("=", 1)[1]

        preferences = store.get_preferences(make_request(cookies={"urlverse_preferences": value}))

        assert preferences.theme == "dark"
        assert preferences.default_flavor == "cyberpunk"

    def test_defaults_when_missing(self, store):
        assert store.get_preferences(make_request()) == UserPreferences()

    @pytest.mark.parametrize("raw", ["not-json", quote('{"theme": "neon"}')])
    def test_garbage_falls_back_to_defaults(self, store, raw):
        preferences = store.get_preferences(make_request(cookies={"urlverse_preferences": raw}))

        assert preferences == UserPreferences()
