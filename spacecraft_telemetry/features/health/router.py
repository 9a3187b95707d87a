"""Health check API endpoints.

- ``/health``: overall status with the store check (200 even when degraded)
- ``/health/live``: the process is up
- ``/health/ready``: the store session is connected (503 otherwise)
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request, Response, status

from spacecraft_telemetry.core.settings import get_app_settings, get_cassandra_settings
from spacecraft_telemetry.features.health.schemas import (
    HealthResponse,
    HealthStatus,
    LivenessResponse,
    ReadinessResponse,
)

router = APIRouter(prefix="/health", tags=["health"])


def _store_checks(request: Request) -> dict[str, bool]:
    if not get_cassandra_settings().enabled:
        return {}
    store = getattr(request.app.state, "store", None)
    return {"cassandra": bool(store is not None and store.is_ready)}


@router.get(
    "",
    response_model=HealthResponse,
    summary="Service health",
)
async def health_check(request: Request) -> HealthResponse:
    app_settings = get_app_settings()
    checks = _store_checks(request)
    return HealthResponse(
        status=HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED,
        timestamp=datetime.now(UTC),
        service=app_settings.service_name,
        version=app_settings.version,
        checks=checks,
    )


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    return LivenessResponse(
        alive=True,
        timestamp=datetime.now(UTC),
        service=get_app_settings().service_name,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
async def readiness(request: Request, response: Response) -> ReadinessResponse:
    checks = _store_checks(request)
    ready = all(checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(ready=ready, checks=checks, timestamp=datetime.now(UTC))
