from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .urls import Server

# Tuned for bulk by-id resolution (one GET per id): high enough that
# independent lookups do not serialize, low enough not to flood the service.
DEFAULT_MAX_CONCURRENCY = 100


class ClientConfig(BaseSettings):
    """Client configuration with automatic environment variable loading.

    All settings can be overridden via environment variables with the OSV_CLIENT_ prefix.
    For example:
        - OSV_CLIENT_SERVER=staging
        - OSV_CLIENT_BASE_URL=http://localhost:8080
        - OSV_CLIENT_MAX_CONCURRENCY=50
        - OSV_CLIENT_TIMEOUT_SECONDS=10

    Alternatively, settings can be provided programmatically when creating the client:
        client = OsvApiClient(Server.STAGING, max_concurrency=20)
    """

    model_config = SettingsConfigDict(
        env_prefix="OSV_CLIENT_",
        case_sensitive=False,
        extra="forbid",
    )

    server: Server = Field(
        default=Server.PRODUCTION,
        description="Well-known OSV server to talk to: production or staging",
    )

    base_url: Optional[str] = Field(
        default=None,
        description="Arbitrary server URL; takes precedence over server when set",
    )

    max_concurrency: int = Field(
        default=DEFAULT_MAX_CONCURRENCY,
        ge=1,
        description="Maximum simultaneous in-flight requests across all hosts (also the worker pool size)",
    )

    max_concurrency_per_host: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum simultaneous in-flight requests to one host. If None, equals max_concurrency",
    )

    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )

    max_redirects: int = Field(
        default=10,
        ge=0,
        description="Maximum number of redirects followed per request",
    )

    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent header sent with every request. If None, httpx's default is used",
    )

    @field_validator("server", mode="before")
    @classmethod
    def _parse_server(cls, value: object) -> object:
        if isinstance(value, str):
            return Server.parse(value)
        return value
