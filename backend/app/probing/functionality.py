"""
Functionality Prober

Sends a small diagnostic payload meant to elicit a representative response
from the target. Falls back to a single GET with the same headers when the
POST fails at the transport level or is rejected with 405.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from app.utils.structured_logging import ProbeMetrics

from .http_client import ProbeHttpClient, bearer_headers
from .schemas import AttemptResult

logger = logging.getLogger(__name__)

DIAGNOSTIC_PAYLOAD: Dict[str, Any] = {
    "input": "Hello, can you respond to confirm you're working?",
    "config": {
        "max_tokens": 50,
    },
}


def functionality_headers(credential: Optional[str] = None) -> Dict[str, str]:
    """Headers shared by the POST and its GET fallback"""
    return {"Content-Type": "application/json", **bearer_headers(credential)}


async def probe_functionality(
    client: ProbeHttpClient,
    url: str,
    credential: Optional[str] = None,
    metrics: Optional[ProbeMetrics] = None,
    log: Optional[logging.Logger] = None,
) -> AttemptResult:
    """
    POST the diagnostic payload and capture the raw response text.

    Args:
        client: HTTP client capability
        url: Target URL
        credential: Optional bearer token
        metrics: Per-probe metrics accumulator
        log: Logger to report fallbacks on

    Returns:
        AttemptResult of the POST, or of the GET fallback

    Raises:
        httpx.RequestError: If the GET fallback fails at the transport level
    """
    log = log or logger
    metrics = metrics or ProbeMetrics(url)
    headers = functionality_headers(credential)

    metrics.increment("requests")
    try:
        attempt = await client.send("POST", url, headers=headers, json_body=DIAGNOSTIC_PAYLOAD)
    except httpx.RequestError as e:
        log.info(f"POST request failed, trying GET... {e}")
        attempt = None
    else:
        if attempt.status_code == 405:
            log.info("POST request not supported, trying GET...")
            attempt = None

    if attempt is None:
        metrics.increment("requests")
        metrics.increment("fallbacks")
        attempt = await client.send("GET", url, headers=headers)

    return attempt
