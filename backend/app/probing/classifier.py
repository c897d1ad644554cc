"""
Response Classifier

Sniffs the functionality response and turns it into one of three variants:

- ``HtmlResponse``   – content-type or body markup says HTML/XML
- ``ServerInfo``     – body is JSON; version, server name and feature tags
                       are guessed from well-known field names
- ``OpaqueResponse`` – anything else, kept verbatim

The feature heuristics are best-effort and not a stable contract.
"""

import json
import logging
import re
from typing import Any, List, Optional
from urllib.parse import urlparse

from .schemas import AttemptResult, Classification, HtmlResponse, OpaqueResponse, ServerInfo

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
HTML_PREFIXES = ("<!DOCTYPE", "<html", "<?xml")

UNKNOWN_SERVER = "Unknown MCP Server"
SMITHERY_HOST = "smithery.ai"
SMITHERY_SERVER = "Smithery MCP Server"

_SMITHERY_PATH_RE = re.compile(r"@smithery-ai/([^/]+)")
_WORD_START_RE = re.compile(r"\b\w")
_TITLE_RE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE)

TEXT_FIELDS = ("response", "output", "completion", "generated_text")
MEMORY_FIELDS = ("memory", "history", "conversation_id")


def classify_response(
    attempt: AttemptResult,
    url: str,
    log: Optional[logging.Logger] = None,
) -> Classification:
    """
    Classify a functionality response.

    Args:
        attempt: Result of the functionality probe
        url: Target URL, used for the server name and URL-based features
        log: Logger for the (debug-level) JSON parse failure

    Returns:
        HtmlResponse, ServerInfo or OpaqueResponse
    """
    log = log or logger

    if is_html_response(attempt.content_type, attempt.body):
        return HtmlResponse(html=attempt.body, title=extract_title(attempt.body))

    server = extract_server_name(url)
    try:
        data = json.loads(attempt.body)
    except (ValueError, RecursionError) as e:
        log.debug(f"Could not parse response as JSON: {e}")
        return OpaqueResponse(server=server, raw_response=attempt.body)

    return summarize_json(data, url, server=server, raw_response=attempt.body)


def is_html_response(content_type: str, body: Any) -> bool:
    """True when the content-type or the body markup says HTML"""
    content_type = content_type or ""
    if any(ct in content_type for ct in HTML_CONTENT_TYPES):
        return True

    if isinstance(body, str):
        text = body.strip()
        return text.startswith(HTML_PREFIXES) or ("<head" in text and "<body" in text)

    return False


def extract_title(html: str) -> Optional[str]:
    match = _TITLE_RE.search(html)
    if match and match.group(1):
        return match.group(1)
    return None


def summarize_json(data: Any, url: str, server: Optional[str] = None, raw_response: str = "") -> ServerInfo:
    """
    Build a ServerInfo from parsed JSON.

    Non-object or empty documents produce a ServerInfo with no version and no
    features.
    """
    info = ServerInfo(server=server or extract_server_name(url), raw_response=raw_response)
    if not _is_set(data) or not isinstance(data, dict):
        return info

    info.version = extract_version(data)
    info.features = extract_features(data, url)
    return info


def extract_version(data: dict) -> Optional[Any]:
    """First of ``version``, ``model_version``, ``model`` that is set"""
    if _is_set(data.get("version")):
        return data["version"]
    if _is_set(data.get("model_version")):
        return data["model_version"]
    if _is_set(data.get("model")):
        model = data["model"]
        return model if isinstance(model, str) else "Unknown"
    return None


def extract_server_name(url: str) -> str:
    """
    Human-readable server name for a URL.

    Smithery-hosted servers are named from their ``@smithery-ai/<name>``
    path segment; everything else uses the hostname.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return UNKNOWN_SERVER

    if hostname and SMITHERY_HOST in hostname:
        match = _SMITHERY_PATH_RE.search(url)
        if match and match.group(1):
            name = _WORD_START_RE.sub(lambda m: m.group(0).upper(), match.group(1).replace("-", " "))
            return f"{name} (Smithery)"
        return SMITHERY_SERVER

    return hostname or UNKNOWN_SERVER


def extract_features(data: dict, url: str) -> List[str]:
    """
    Capability tags guessed from field names.

    Order follows the checks below; each tag appears at most once.
    """
    features: List[str] = []

    def add(tag: str):
        if tag not in features:
            features.append(tag)

    if isinstance(data.get("choices"), list):
        add("Text Generation")

    if any(_is_set(data.get(field)) for field in TEXT_FIELDS):
        add("Text Processing")

    model = data.get("model")
    if isinstance(model, str) and "gpt" in model:
        add("Language Model")

    model_name = model.lower() if isinstance(model, str) else ""
    if "sequential" in model_name or (url and "sequential" in url.lower()):
        add("Sequential Processing")

    if "reasoning" in model_name or _is_set(data.get("reasoning")) or _is_set(data.get("thoughts")):
        add("AI Reasoning")

    if any(_is_set(data.get(field)) for field in MEMORY_FIELDS):
        add("Memory")

    return features


def _is_set(value: Any) -> bool:
    # Containers count as set even when empty
    if isinstance(value, (list, dict)):
        return True
    return bool(value)
