"""
Pytest configuration

Outbound HTTP is never real: the probers talk to a ``FakeUpstream`` through
``httpx.MockTransport``, which records every request it receives.
"""
from typing import Any, Dict, List, Optional

import httpx
import pytest

from app.core.config import Settings
from app.probing.http_client import ProbeHttpClient


class FakeUpstream:
    """
    Scripted target server.

    Responses are configured per HTTP method with :meth:`on`; unconfigured
    methods answer 404. Each call builds a fresh ``httpx.Response``.
    """

    def __init__(self):
        self.routes: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        status_code: int = 200,
        *,
        json: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        error: Optional[Exception] = None,
    ) -> "FakeUpstream":
        self.routes[method] = {
            "status_code": status_code,
            "json": json,
            "text": text,
            "headers": headers,
            "error": error,
        }
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.method)
        if route is None:
            return httpx.Response(404)
        if route["error"] is not None:
            raise route["error"]
        if route["json"] is not None:
            return httpx.Response(route["status_code"], json=route["json"], headers=route["headers"])
        return httpx.Response(route["status_code"], text=route["text"] or "", headers=route["headers"])

    @property
    def methods(self) -> List[str]:
        return [r.method for r in self.requests]


@pytest.fixture
def test_settings():
    """Settings isolated from any local .env file"""
    return Settings(_env_file=None)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def probe_client(upstream, test_settings):
    """ProbeHttpClient whose requests are served by ``upstream``"""
    transport = httpx.MockTransport(upstream)
    return ProbeHttpClient(
        test_settings,
        client=httpx.AsyncClient(transport=transport, follow_redirects=True),
    )
