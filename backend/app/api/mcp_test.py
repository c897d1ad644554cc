"""
MCP Test API Endpoints

REST API used by the browser page to test a server.
"""

from typing import Any, AsyncIterator

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..core.config import get_settings
from ..probing import ProbeHttpClient, ProbePipeline, ProbeRequest, ProbeResult

router = APIRouter(prefix="/api", tags=["MCP Testing"])


# ---------------------------------------------------------------------------
# Dependency helpers
# ---------------------------------------------------------------------------

async def get_http_client() -> AsyncIterator[ProbeHttpClient]:
    """FastAPI dependency – one outbound HTTP client per request."""
    async with ProbeHttpClient(get_settings()) as client:
        yield client


async def get_probe_pipeline(
    http_client: ProbeHttpClient = Depends(get_http_client),
) -> ProbePipeline:
    return ProbePipeline(http_client, get_settings())


@router.post("/test-mcp")
async def run_mcp_test(
    payload: Any = Body(default=None),
    pipeline: ProbePipeline = Depends(get_probe_pipeline),
):
    """
    Test connectivity and basic functionality of a server.

    Returns 400 when ``serverUrl`` is missing or not a string, 500 when the
    probe itself failed, and 200 with the connectivity/functionality report
    otherwise.
    """
    try:
        request = ProbeRequest.model_validate(payload or {})
    except ValidationError:
        result = ProbeResult.validation_error()
    else:
        result = await pipeline.run(request)
    return JSONResponse(status_code=result.http_status, content=result.to_response())
