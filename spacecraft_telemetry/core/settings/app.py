"""APP_* settings: API identity, routing prefix and the uvicorn bind address."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """HTTP surface of the gateway.

    Telemetry and catalog routes are mounted under ``api_prefix``; health
    and metrics stay at the root for probes and scrapers.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    service_name: str = Field(
        default="spacecraft-telemetry",
        max_length=100,
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
    )
    title: str = Field(default="Spacecraft Telemetry API", min_length=1)
    description: str = "Paged reads of spacecraft journey telemetry from Cassandra"
    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$")
    environment: Environment = "development"

    api_prefix: str = Field(default="/api", pattern=r"^/.*$")
    debug: bool = False
    docs_url: str | None = "/docs"
    openapi_url: str | None = "/openapi.json"

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
