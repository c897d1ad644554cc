"""
Application configuration

Settings are read from the environment and an optional ``.env`` file.
Use ``get_settings()`` for the cached process-wide instance.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__version__ = "1.0.0"


class Settings(BaseSettings):
    """Runtime configuration for the MCP server tester"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "MCP Server Tester"
    VERSION: str = __version__

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    STATIC_DIR: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Outbound probing
    REQUEST_TIMEOUT: float = 30.0
    CONNECTIVITY_FALLBACK_TIMEOUT: float = 10.0
    FOLLOW_REDIRECTS: bool = True
    USER_AGENT: str = f"mcp-server-tester/{__version__}"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {v}")
        return level

    @field_validator("REQUEST_TIMEOUT", "CONNECTIVITY_FALLBACK_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

