"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- A programmable fake of the Gemini REST endpoint (httpx.MockTransport)
- Test client (FastAPI TestClient) wired to the fake
- Response body factories
"""

from typing import Any, Callable, Dict, Generator, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from urlverse.ai.flavors import BUILTIN_FLAVORS, FlavorRegistry
from urlverse.ai.monitoring.metrics import PerformanceMonitor
from urlverse.ai.providers.gemini import GeminiClient
from urlverse.core.config import settings
from urlverse.deps import get_client_factory
from urlverse.main import app


# Structurally valid, not a real key
VALID_API_KEY = "AIzaSyA1234567890abcdefghijklmnopqrstu"


# ---------------------------------------------------------------------------
# RESPONSE BODIES
# ---------------------------------------------------------------------------

def gemini_success_body(text: str, prompt_tokens: int = 120, completion_tokens: int = 480) -> Dict[str, Any]:
    """generateContent success payload."""
    return {
        "candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}],
        "usageMetadata": {
            "promptTokenCount": prompt_tokens,
            "candidatesTokenCount": completion_tokens,
            "totalTokenCount": prompt_tokens + completion_tokens,
        },
    }


def gemini_error_body(code: int, message: str, reason: Optional[str] = None) -> Dict[str, Any]:
    """generateContent error payload."""
    error: Dict[str, Any] = {"code": code, "message": message, "status": "ERROR"}
    if reason:
        error["details"] = [{
            "@type": "type.googleapis.com/google.rpc.ErrorInfo",
            "reason": reason,
            "domain": "googleapis.com",
        }]
    return {"error": error}


# ---------------------------------------------------------------------------
# FAKE GEMINI API
# ---------------------------------------------------------------------------

class FakeGeminiAPI:
    """
    Programmable stand-in for the Gemini endpoint.

    Records every request so tests can assert on headers, body and call count.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json=gemini_success_body("<html><body><h1>Generated</h1></body></html>")
        )

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def reply(self, status_code: int = 200, json: Any = None, text: Optional[str] = None) -> None:
        if json is not None:
            self._responder = lambda request: httpx.Response(status_code, json=json)
        else:
            self._responder = lambda request: httpx.Response(status_code, text=text or "")

    def reply_text(self, text: str) -> None:
        """Successful generation returning the given model text."""
        self.reply(200, json=gemini_success_body(text))

    def fail_with(self, exc_factory: Callable[[httpx.Request], Exception]) -> None:
        def responder(request: httpx.Request) -> httpx.Response:
            raise exc_factory(request)
        self._responder = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def client(self, api_key: str = VALID_API_KEY, **kwargs) -> GeminiClient:
        return GeminiClient(api_key, http_client=self.http_client(), **kwargs)

    def client_factory(self) -> Callable[[str], GeminiClient]:
        return lambda api_key: self.client(api_key)


@pytest.fixture
def fake_api() -> FakeGeminiAPI:
    return FakeGeminiAPI()


@pytest.fixture
def registry() -> FlavorRegistry:
    """Fresh registry with all built-in flavors enabled."""
    return FlavorRegistry(BUILTIN_FLAVORS, default_id="parallelverse")


@pytest.fixture
def monitor() -> PerformanceMonitor:
    return PerformanceMonitor()


@pytest.fixture(autouse=True)
def no_server_api_key(monkeypatch):
    """Tests never pick up a real key from the environment."""
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")


# ---------------------------------------------------------------------------
# HTTP CLIENT
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def client(fake_api: FakeGeminiAPI) -> Generator[TestClient, None, None]:
    """
    Create a test client whose Gemini calls go to the fake API.

    Overrides the get_client_factory dependency.
    """
    app.dependency_overrides[get_client_factory] = fake_api.client_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    """Header carrying a structurally valid visitor key."""
    return {"x-goog-api-key": VALID_API_KEY}
