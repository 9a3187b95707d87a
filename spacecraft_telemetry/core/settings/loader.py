"""LRU-cached settings loaders.

Each domain is read from the environment (and ``.env``) once, validated and
frozen; later calls return the same instance. The lifespan, the CLI and the
health probes all go through these loaders, so they agree on one view of the
configuration for the lifetime of the process.

Usage:
    from spacecraft_telemetry.core.settings.loader import get_cassandra_settings

    store = CassandraStore(get_cassandra_settings())

Testing:
    Environment changes only take effect after clearing the cache:
    clear_all_caches()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .cassandra import CassandraSettings
from .logs import LoggingSettings
from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """HTTP surface: service identity, API prefix, bind address."""
    return AppSettings()


@lru_cache(maxsize=1)
def get_cassandra_settings() -> CassandraSettings:
    """Store connection: contact points or Astra bundle, keyspace, credentials."""
    return CassandraSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Default and maximum page sizes for telemetry reads."""
    return PaginationSettings()


def clear_all_caches() -> None:
    """Forget every loaded domain so the next call re-reads the environment."""
    for loader in (
        get_app_settings,
        get_cassandra_settings,
        get_logging_settings,
        get_pagination_settings,
    ):
        loader.cache_clear()
