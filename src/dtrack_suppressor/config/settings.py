from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration with automatic environment variable loading.

    All settings can be overridden via environment variables with the DTRACK_ prefix
    or a .env file in the working directory. For example:
        - DTRACK_API_URL=https://dtrack.example.com
        - DTRACK_API_KEY=eyJhbGciOi...
        - DTRACK_TIMEOUT_SECONDS=30
        - DTRACK_REQUESTS_PER_SECOND=5

    Alternatively, settings can be provided programmatically:
        container = Container()
        container.config.from_pydantic(AppConfig(api_key="..."))
    """

    model_config = SettingsConfigDict(
        env_prefix="DTRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: str = Field(
        default="http://localhost:8081",
        description="Base URL of the Dependency-Track API server (without /api/v1)",
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Bearer token sent as 'Authorization: Bearer <token>'. Required by every request.",
    )

    timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds. If None, requests never time out",
    )

    requests_per_second: Optional[float] = Field(
        default=None,
        gt=0,
        description="Client-side request rate cap. If None, requests are not throttled",
    )
