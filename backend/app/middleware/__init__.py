"""
Middleware for the tester API

Request correlation/timing, a last-resort error envelope that matches the
``/api/test-mcp`` error shape, and CORS for the browser page.
"""
import logging
import time
import uuid
from typing import Callable, List

from fastapi import Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..probing.schemas import ErrorInfo

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id (the caller's ``X-Request-ID`` if sent) and
    log one line per request once the response is ready.
    """
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} in {elapsed * 1000:.1f}ms",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed * 1000, 1),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.6f}"
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn anything that escapes a route into ``{success, message, error}``"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "message": INTERNAL_ERROR_MESSAGE,
                    "error": ErrorInfo.from_exception(exc).model_dump(
                        mode="json", by_alias=True, exclude_none=True
                    ),
                },
            )


def setup_middleware(app, cors_origins: List[str]):
    """
    Install middleware on *app*.

    Starlette runs the last added middleware first, so CORS sees every
    request, the context middleware tags error responses too, and the error
    handler sits closest to the routes.
    """
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
