"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacecraft_telemetry.core.settings import get_app_settings
from spacecraft_telemetry.features.catalog.router import router as catalog_router
from spacecraft_telemetry.features.health.metrics import router as metrics_router
from spacecraft_telemetry.features.health.router import router as health_router
from spacecraft_telemetry.features.telemetry.router import router as telemetry_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from spacecraft_telemetry.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    # Observability endpoints live outside the API prefix
    app.include_router(metrics_router)
    app.include_router(health_router)

    app.include_router(telemetry_router, prefix=api_prefix, tags=["telemetry"])
    app.include_router(catalog_router, prefix=api_prefix, tags=["catalog"])

    logger.debug("Routers registered", extra={"api_prefix": api_prefix})
