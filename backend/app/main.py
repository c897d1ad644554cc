"""
MCP Server Tester – FastAPI application

Run with ``mcp-tester-serve`` or ``uvicorn app.main:app``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api import mcp_test
from app.core.config import Settings, get_settings
from app.middleware import setup_middleware
from app.utils.structured_logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application from *settings* (cached settings by default)."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Probe an HTTP endpoint for reachability and basic functional response",
    )
    setup_middleware(application, settings.CORS_ORIGINS)

    application.include_router(mcp_test.router)

    @application.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.VERSION}

    # Mounted last so API routes take precedence
    if settings.STATIC_DIR:
        static_dir = Path(settings.STATIC_DIR)
        if static_dir.is_dir():
            application.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        else:
            logger.warning(f"STATIC_DIR {static_dir} does not exist, not serving static files")

    return application


app = create_app()


def run():
    """Console entry point: serve the app on the configured host and port."""
    settings = get_settings()
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
