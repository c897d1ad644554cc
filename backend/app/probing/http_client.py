"""
Probe HTTP Client

Thin async wrapper around ``httpx.AsyncClient`` that turns every response,
whatever its status, into an :class:`AttemptResult`. Only transport-level
failures raise (``httpx.RequestError``).
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings, get_settings

from .schemas import AttemptResult

logger = logging.getLogger(__name__)


class ProbeHttpClient:
    """
    HTTP client capability used by the probers.

    Args:
        settings: Application settings (timeouts, redirects, user agent)
        client: Pre-built ``httpx.AsyncClient``; tests pass one backed by
            ``httpx.MockTransport``
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.FOLLOW_REDIRECTS,
            timeout=self.settings.REQUEST_TIMEOUT,
            headers={"User-Agent": self.settings.USER_AGENT},
        )

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> AttemptResult:
        """
        Send one request and return its result without raising on 4xx/5xx.

        Args:
            method: HTTP method
            url: Target URL
            headers: Request headers
            json_body: Payload serialized as JSON, if any
            timeout: Per-request timeout in seconds; client default when None

        Returns:
            AttemptResult with status, headers and the body as text
        """
        kwargs: Dict[str, Any] = {"headers": dict(headers or {})}
        if json_body is not None:
            kwargs["json"] = json_body
        if timeout is not None:
            kwargs["timeout"] = timeout

        logger.debug(f"{method} {url}")
        response = await self._client.request(method, url, **kwargs)
        return AttemptResult.from_httpx(response)

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ProbeHttpClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


def bearer_headers(credential: Optional[str]) -> Dict[str, str]:
    """Authorization header for a non-empty credential, else nothing."""
    if credential:
        return {"Authorization": f"Bearer {credential}"}
    return {}
