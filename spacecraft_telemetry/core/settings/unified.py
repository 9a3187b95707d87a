"""Unified settings composition for convenient access.

Usage:
    from spacecraft_telemetry.core.settings import get_settings

    settings = get_settings()
    print(settings.app.port)
    print(settings.cassandra.keyspace)

Each nested settings class still respects its own env prefix. Production
code that only needs one domain should prefer the get_*_settings() loaders.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from .app import AppSettings
from .cassandra import CassandraSettings
from .loader import (
    get_app_settings,
    get_cassandra_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings


class Settings(BaseModel):
    """All settings domains in one object."""

    model_config = ConfigDict(frozen=True)

    app: AppSettings
    cassandra: CassandraSettings
    logging: LoggingSettings
    pagination: PaginationSettings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached unified settings built from the per-domain loaders."""
    return Settings(
        app=get_app_settings(),
        cassandra=get_cassandra_settings(),
        logging=get_logging_settings(),
        pagination=get_pagination_settings(),
    )
