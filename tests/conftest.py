"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from typing import Any, Callable

import httpx
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("TRAVIS_TOKEN", "travis_test_token")
    monkeypatch.setenv("APPVEYOR_TOKEN", "appveyor_test_token")
    monkeypatch.setenv("TRACKED_BRANCH", "auto")
    monkeypatch.setenv("TRACKED_REPOS", "rust-lang/cargo, rust-lang/rust")
    monkeypatch.delenv("APPVEYOR_ACCOUNT", raising=False)
    monkeypatch.delenv("POLL_INTERVAL", raising=False)
    monkeypatch.delenv("CYCLE_DEADLINE", raising=False)


# ============================================================================
# Fake provider APIs
# ============================================================================

class FakeProvider:
    """Routes httpx requests to canned responses and records every request."""

    def __init__(self, prefix: str = ""):
        self._prefix = prefix
        self._routes: dict[tuple[str, str], Callable[[httpx.Request], Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        content: bytes | None = None,
        handler: Callable[[httpx.Request], Any] | None = None,
    ) -> None:
        """Register a response for ``method`` on ``path`` (relative to the prefix)."""
        if handler is None:
            def handler(request, json=json, status=status, content=content):
                if content is not None:
                    return httpx.Response(status, content=content)
                if json is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=json)

        self._routes[(method, f"{self._prefix}{path}")] = handler

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")
        return handler(request)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == f"{self._prefix}{path}")
        ]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def travis_api():
    """Fake Travis API."""
    return FakeProvider()


@pytest.fixture
def appveyor_api():
    """Fake AppVeyor API, mounted under /api like the real one."""
    return FakeProvider(prefix="/api")


@pytest.fixture
def travis(travis_api):
    """Travis transport talking to the fake API."""
    from reaper.services.transport import travis_transport
    return travis_transport(travis_api.client(), "travis_test_token")


@pytest.fixture
def appveyor(appveyor_api):
    """AppVeyor transport talking to the fake API."""
    from reaper.services.transport import appveyor_transport
    return appveyor_transport(appveyor_api.client(), "appveyor_test_token")


@pytest.fixture
def repo():
    """A tracked repository."""
    from reaper.models.repository import Repository
    return Repository("rust-lang", "cargo")

