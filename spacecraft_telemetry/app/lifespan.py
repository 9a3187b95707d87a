"""Startup and shutdown of the gateway process.

On startup logging is configured first, then the Cassandra session is
opened and the per-kind read plans and catalog statements are prepared
against it. Route dependencies find the results on ``app.state``:
``store``, ``telemetry_service`` and ``catalog_service``. All three stay
``None`` when the store is disabled or unreachable; telemetry routes then
answer 503 while health keeps reporting ``degraded``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from spacecraft_telemetry.core.settings import (
    get_app_settings,
    get_cassandra_settings,
    get_logging_settings,
    get_pagination_settings,
)
from spacecraft_telemetry.features.catalog.service import CatalogService
from spacecraft_telemetry.features.telemetry.service import TelemetryService
from spacecraft_telemetry.infra.cassandra.session import CassandraStore
from spacecraft_telemetry.infra.logging.config import setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _detach(app: FastAPI) -> CassandraStore | None:
    store = getattr(app.state, "store", None)
    app.state.store = None
    app.state.telemetry_service = None
    app.state.catalog_service = None
    return store


async def _attach_store(app: FastAPI) -> None:
    settings = get_cassandra_settings()
    _detach(app)

    if not settings.is_configured:
        logger.info("Cassandra integration disabled; telemetry routes will answer 503")
        return

    store = CassandraStore(settings)
    try:
        await store.startup()
        telemetry = TelemetryService.from_store(store, get_pagination_settings())
        catalog = CatalogService.from_store(store)
    except Exception as e:
        await store.shutdown()
        if settings.startup_require_store:
            logger.exception("Cassandra is required (CASSANDRA_STARTUP_REQUIRE_STORE) but unavailable")
            raise
        logger.warning(
            "Cassandra unavailable, serving in degraded mode",
            extra={"error": str(e), "keyspace": settings.keyspace},
        )
        return

    app.state.store = store
    app.state.telemetry_service = telemetry
    app.state.catalog_service = catalog
    logger.info("Telemetry read plans prepared", extra={"keyspace": settings.keyspace})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    api = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Starting %s %s",
        api.service_name,
        api.version,
        extra={"environment": api.environment},
    )

    await _attach_store(app)
    try:
        yield
    finally:
        store = _detach(app)
        if store is not None:
            await store.shutdown()
        logger.info("Shutdown complete")
