"""Runtime settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Settings loaded from ``TYPEDREST_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TYPEDREST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: LogLevel = "INFO"
    log_bodies: bool = False

    request_timeout: float = Field(default=30.0, ge=1, le=120)
    connect_timeout: float = Field(default=5.0, gt=0, le=60)
    max_connections: int = Field(default=20, ge=1, le=500)
    http2: bool = True
    user_agent: str | None = None

    expose_decode_errors: bool = True
