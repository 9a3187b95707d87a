"""Service dependencies for FastAPI route handlers.

The store session and the services built on it live on ``app.state``; they
are created by the lifespan and never constructed per request.

Usage:
    from spacecraft_telemetry.core.dependencies.services import TelemetryServiceDep

    @router.get("/{kind}")
    async def read(kind: TelemetryKind, service: TelemetryServiceDep):
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

from spacecraft_telemetry.core.exceptions import StoreUnavailable
from spacecraft_telemetry.features.catalog.service import CatalogService
from spacecraft_telemetry.features.telemetry.service import TelemetryService

if TYPE_CHECKING:
    from spacecraft_telemetry.infra.cassandra.session import PagedStatementExecutor


def _from_state(request: Request, name: str) -> object:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise StoreUnavailable(
            "Telemetry store is not available",
            extra={"component": name},
        )
    return value


def get_store(request: Request) -> PagedStatementExecutor | None:
    """Get the store session attached at startup, if any."""
    return getattr(request.app.state, "store", None)


def get_telemetry_service(request: Request) -> TelemetryService:
    """Get the telemetry service.

    Raises:
        StoreUnavailable: If the store was not started (503)
    """
    return _from_state(request, "telemetry_service")  # type: ignore[return-value]


def get_catalog_service(request: Request) -> CatalogService:
    """Get the journey catalog service.

    Raises:
        StoreUnavailable: If the store was not started (503)
    """
    return _from_state(request, "catalog_service")  # type: ignore[return-value]


TelemetryServiceDep = Annotated[TelemetryService, Depends(get_telemetry_service)]
CatalogServiceDep = Annotated[CatalogService, Depends(get_catalog_service)]

__all__ = [
    "CatalogServiceDep",
    "TelemetryServiceDep",
    "get_catalog_service",
    "get_store",
    "get_telemetry_service",
]
