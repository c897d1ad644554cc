"""
Connectivity Prober

Lightweight reachability check: HEAD, falling back to a bounded GET when the
HEAD request fails at the transport level or is rejected with 405.
"""

import logging
from typing import Optional

import httpx

from app.utils.structured_logging import ProbeMetrics

from .errors import UpstreamServerError
from .http_client import ProbeHttpClient, bearer_headers
from .schemas import AttemptResult

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TIMEOUT = 10.0


async def probe_connectivity(
    client: ProbeHttpClient,
    url: str,
    credential: Optional[str] = None,
    fallback_timeout: float = DEFAULT_FALLBACK_TIMEOUT,
    metrics: Optional[ProbeMetrics] = None,
    log: Optional[logging.Logger] = None,
) -> AttemptResult:
    """
    Check that the target answers at all.

    Args:
        client: HTTP client capability
        url: Target URL
        credential: Optional bearer token
        fallback_timeout: Timeout in seconds for the GET fallback
        metrics: Per-probe metrics accumulator
        log: Logger to report fallbacks on

    Returns:
        AttemptResult of the HEAD request, or of the GET fallback

    Raises:
        UpstreamServerError: If the final status is 5xx
        httpx.RequestError: If the GET fallback fails at the transport level
    """
    log = log or logger
    metrics = metrics or ProbeMetrics(url)
    headers = bearer_headers(credential)

    metrics.increment("requests")
    try:
        attempt = await client.send("HEAD", url, headers=headers)
    except httpx.RequestError as e:
        log.info(f"HEAD request failed, falling back to GET... {e}")
        attempt = None
    else:
        if attempt.status_code == 405:
            log.info("HEAD request not supported, falling back to GET...")
            attempt = None

    if attempt is None:
        metrics.increment("requests")
        metrics.increment("fallbacks")
        attempt = await client.send("GET", url, headers=headers, timeout=fallback_timeout)

    if attempt.status_code >= 500:
        raise UpstreamServerError(attempt)

    return attempt
