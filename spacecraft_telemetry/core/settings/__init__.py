"""Modular Pydantic Settings v2 configuration.

One settings model per domain (app/cassandra/logging/pagination), each with
its own environment prefix, frozen after validation and loaded once through
LRU-cached loaders:

    from spacecraft_telemetry.core.settings import get_cassandra_settings

Or use unified settings for convenient access to all domains:

    from spacecraft_telemetry.core.settings import get_settings

    settings = get_settings()
    print(settings.cassandra.keyspace)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .cassandra import CassandraSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_cassandra_settings,
    get_logging_settings,
    get_pagination_settings,
)
from .logs import LoggingSettings
from .pagination import PaginationSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "CassandraSettings",
    "LoggingSettings",
    "PaginationSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_cassandra_settings",
    "get_logging_settings",
    "get_pagination_settings",
    "get_settings",
]
