"""
Probe Schemas

Pydantic models for the probe pipeline: the incoming request, per-attempt
HTTP results, classified response variants, and the wire-format result
returned by ``POST /api/test-mcp``.
"""

from typing import Any, Dict, List, Literal, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

VALIDATION_ERROR_MESSAGE = "Server URL is required"
EXCEPTION_MESSAGE = "Failed to test server"
HTML_SUCCESS_MESSAGE = "Server responded with HTML content (displaying webpage)"
SUCCESS_MESSAGE = "MCP server is reachable"
FAILURE_MESSAGE = "Server accessible but returned errors"
SERVER_UNREACHABLE_MESSAGE = "Failed to connect to MCP server"


class ProbeRequest(BaseModel):
    """Request model for a single probe (``{serverUrl, apiKey?}`` on the wire)"""
    model_config = ConfigDict(populate_by_name=True)

    target_url: Optional[str] = Field(default=None, alias="serverUrl", description="Endpoint to probe")
    credential: Optional[str] = Field(default=None, alias="apiKey", description="Bearer token")


class AttemptResult(BaseModel):
    """Outcome of one HTTP call against the target"""
    method: str
    url: str
    status_code: int
    status_text: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "AttemptResult":
        return cls(
            method=response.request.method,
            url=str(response.request.url),
            status_code=response.status_code,
            status_text=response.reason_phrase,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=response.text,
        )


# ---------------------------------------------------------------------------
# Classified response variants
# ---------------------------------------------------------------------------

class HtmlResponse(BaseModel):
    """Body recognised as an HTML (or XML) document"""
    kind: Literal["html"] = "html"
    html: str
    title: Optional[str] = None

    @property
    def is_html(self) -> bool:
        return True


class ServerInfo(BaseModel):
    """Summary derived from a JSON body"""
    kind: Literal["server_info"] = "server_info"
    server: str
    version: Optional[Any] = None
    features: List[str] = Field(default_factory=list)
    raw_response: str = ""

    @property
    def is_html(self) -> bool:
        return False


class OpaqueResponse(BaseModel):
    """Body that is neither HTML nor JSON; kept verbatim"""
    kind: Literal["opaque"] = "opaque"
    server: str
    raw_response: str = ""

    @property
    def is_html(self) -> bool:
        return False


Classification = Union[HtmlResponse, ServerInfo, OpaqueResponse]


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------

class ConnectivityReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(alias="statusText")
    headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_attempt(cls, attempt: AttemptResult) -> "ConnectivityReport":
        return cls(status=attempt.status_code, status_text=attempt.status_text, headers=attempt.headers)


class ServerSummary(BaseModel):
    """Non-HTML functionality response as rendered by the browser page"""
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success", "failed"]
    message: str
    server: str
    version: Optional[Any] = None
    features: Optional[List[str]] = None
    raw_response: str = Field(default="", alias="_rawResponse")


class FunctionalityReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(alias="statusText")
    response: Union[str, ServerSummary]
    is_html: bool = Field(alias="isHtml")
    headers: Dict[str, str] = Field(default_factory=dict)


class ErrorInfo(BaseModel):
    """Either upstream response details or just an exception message"""
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[int] = None
    status_text: Optional[str] = Field(default=None, alias="statusText")
    data: Optional[Any] = None
    headers: Optional[Dict[str, str]] = None
    message: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        response = getattr(exc, "response", None)
        if isinstance(response, httpx.Response):
            try:
                data = response.json()
            except ValueError:
                data = response.text
            return cls(
                status=response.status_code,
                status_text=response.reason_phrase,
                data=data,
                headers={k.lower(): v for k, v in response.headers.items()},
            )
        return cls(message=str(exc) or type(exc).__name__)


class ProbeResult(BaseModel):
    """Complete probe outcome"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    connectivity: Optional[ConnectivityReport] = None
    functionality: Optional[FunctionalityReport] = None
    error: Optional[ErrorInfo] = None
    http_status: int = Field(default=200, exclude=True)

    @classmethod
    def validation_error(cls) -> "ProbeResult":
        return cls(success=False, message=VALIDATION_ERROR_MESSAGE, http_status=400)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ProbeResult":
        return cls(
            success=False,
            message=EXCEPTION_MESSAGE,
            error=ErrorInfo.from_exception(exc),
            http_status=500,
        )

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the JSON body sent to the browser."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
