"""
Pytest configuration and shared fixtures for the patch history client tests.
"""
import json
from typing import Any, Callable, List, Optional
from unittest.mock import patch

import httpx
import pytest


BASE_URL = "https://history.example.com"
API_KEY = "test-api-key"


class FakeHistoryAPI:
    """In-process stand-in for the history backend, served through httpx.MockTransport"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responder: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def respond(self, status_code: int = 200, json_body: Any = None, content: Optional[bytes] = None):
        """Answer every following request with a fixed response"""
        def _responder(request):
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json_body)
        self._responder = _responder

    def fail_with(self, exc_type=httpx.ConnectError, message: str = "connection refused"):
        """Make every following request fail before a response arrives"""
        def _responder(request):
            raise exc_type(message, request=request)
        self._responder = _responder

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responder is None:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._responder(request)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def history_env(monkeypatch):
    """Point the client at a fake backend via LOCAL_* variables"""
    for var in ("HISTORY_API_BASE_URL", "HISTORY_API_KEY", "HISTORY_API_TIMEOUT"):
        for prefix in ("", "PROD_", "STAGE_", "LOCAL_"):
            monkeypatch.delenv(f"{prefix}{var}", raising=False)
    monkeypatch.setenv("APP_ENV", "local")
    monkeypatch.setenv("LOCAL_HISTORY_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("LOCAL_HISTORY_API_KEY", API_KEY)
    return monkeypatch


@pytest.fixture
def fake_api(history_env):
    """FakeHistoryAPI wired into every httpx.AsyncClient the service creates"""
    api = FakeHistoryAPI()
    real_client = httpx.AsyncClient

    def _client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(api.handle)
        return real_client(*args, **kwargs)

    with patch("app.services.history.service.httpx.AsyncClient", side_effect=_client_factory):
        yield api


@pytest.fixture
def sample_record():
    """Fully populated history record"""
    return {
        "id": "p1",
        "timestamp": 1705320000000,
        "summary": "Add orders table",
        "patch": [{"op": "add", "path": "/tables/orders"}],
        "beforeSchema": {"tables": {}},
        "afterSchema": {"tables": {"orders": {"columns": ["id"]}}},
        "source": "AI",
        "baseVersion": 6,
        "toVersion": 7,
        "impact": {"added": ["orders"], "updated": [], "removed": []},
        "counts": {"added": 1, "updated": 0, "removed": 0, "validOps": 1, "skippedOps": 0},
    }


@pytest.fixture
def language_env(monkeypatch):
    """Clear runtime language variables so each test sets exactly what it needs"""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
