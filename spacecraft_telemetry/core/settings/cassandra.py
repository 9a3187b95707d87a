"""Cassandra / DataStax Astra connection settings.

Supports both:
- a self-managed cluster reached through contact points
- Astra, reached through a secure connect bundle (zip on disk)

When a secure connect bundle is configured, contact points, port and local
datacenter are ignored; the bundle carries them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class CassandraSettings(BaseSettings):
    """Cassandra cluster and session settings.

    Environment variables use CASSANDRA_ prefix.
    Example: CASSANDRA_CONTACT_POINTS=["10.0.0.1","10.0.0.2"], CASSANDRA_KEYSPACE=spacecraft
    """

    # ─────────────────────────────────────────────────────
    # Enable/disable toggle
    # ─────────────────────────────────────────────────────
    enabled: bool = Field(
        default=True,
        description="Enable store integration. Set to False for tests.",
    )

    # ─────────────────────────────────────────────────────
    # Connection Parameters
    # ─────────────────────────────────────────────────────
    contact_points: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["127.0.0.1"],
        description="Cassandra contact points (JSON array or comma-separated)",
    )
    port: int = Field(default=9042, ge=1, le=65535, description="Native protocol port")
    local_datacenter: str | None = Field(
        default=None,
        max_length=100,
        description="Local datacenter for DC-aware load balancing",
    )
    keyspace: str = Field(
        default="spacecraft",
        min_length=1,
        max_length=48,
        pattern=r"^[A-Za-z][A-Za-z0-9_]*$",
        description="Keyspace holding the catalog and telemetry tables",
    )
    secure_connect_bundle: Path | None = Field(
        default=None,
        description="Path to an Astra secure connect bundle zip",
    )
    replication_factor: int = Field(
        default=1,
        ge=1,
        le=10,
        description="SimpleStrategy replication factor used when provisioning the keyspace",
    )

    # ─────────────────────────────────────────────────────
    # Credentials
    # ─────────────────────────────────────────────────────
    username: str | None = Field(default=None, description="Auth username (client id on Astra)")
    password: SecretStr | None = Field(default=None, description="Auth password (client secret on Astra)")

    # ─────────────────────────────────────────────────────
    # Timeouts
    # ─────────────────────────────────────────────────────
    connect_timeout: float = Field(
        default=10.0, gt=0, le=120.0, description="Connection establishment timeout in seconds",
    )
    request_timeout: float = Field(
        default=10.0, gt=0, le=120.0, description="Per-request timeout in seconds",
    )
    protocol_version: int | None = Field(
        default=None, ge=3, le=6, description="Native protocol version (None lets the driver negotiate)",
    )

    startup_require_store: bool = Field(
        default=True,
        description=(
            "If True, service fails fast when the store is unavailable at startup. "
            "If False, service starts but reports unhealthy until restarted."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="CASSANDRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("contact_points", mode="before")
    @classmethod
    def split_contact_points(cls, v: object) -> object:
        """Accept a JSON array or a comma-separated string as well as a list."""
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_configured(self) -> bool:
        """Check if the store is configured with valid connection info."""
        return self.enabled and bool(self.secure_connect_bundle or self.contact_points)

    @property
    def uses_cloud_bundle(self) -> bool:
        """Whether the connection goes through an Astra secure connect bundle."""
        return self.secure_connect_bundle is not None
