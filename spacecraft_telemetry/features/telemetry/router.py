"""Instrument readings API router."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query

from spacecraft_telemetry.core.dependencies.services import TelemetryServiceDep
from spacecraft_telemetry.core.pagination import PagedResult
from spacecraft_telemetry.features.telemetry.entities import TelemetryKind
from spacecraft_telemetry.features.telemetry.models import (
    LocationReading,
    PressureReading,
    SpeedReading,
    TemperatureReading,
)
from spacecraft_telemetry.features.telemetry.reader import PageRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spacecraft/{spacecraft_name}/{journey_id}/instruments")

PageSizeQuery = Query(
    None,
    alias="pageSize",
    description="Rows per page (default 10)",
)
PageStateQuery = Query(
    None,
    alias="pageState",
    description="pageState returned by the previous page",
)


async def _read_page(
    service: TelemetryServiceDep,
    kind: TelemetryKind,
    spacecraft_name: str,
    journey_id: str,
    page_size: int | None,
    page_state: str | None,
) -> PagedResult:
    page = await service.read(
        kind,
        PageRequest(
            spacecraft_name=spacecraft_name,
            journey_id=journey_id,
            page_size=page_size,
            cursor=page_state,
        ),
    )
    return page.to_paged_result()


@router.get(
    "/temperature",
    response_model=PagedResult[TemperatureReading],
    summary="Temperature readings of a journey",
)
async def get_temperature_readings(
    spacecraft_name: str,
    journey_id: str,
    service: TelemetryServiceDep,
    page_size: int | None = PageSizeQuery,
    page_state: str | None = PageStateQuery,
) -> PagedResult:
    """Read one page of temperature readings.

    Example:
        ```bash
        curl "http://localhost:8080/api/spacecraft/gemini3/abb7c000-c310-11ac-8080-808080808080/instruments/temperature?pageSize=10"
        ```
    """
    return await _read_page(
        service, TelemetryKind.TEMPERATURE, spacecraft_name, journey_id, page_size, page_state
    )


@router.get(
    "/pressure",
    response_model=PagedResult[PressureReading],
    summary="Pressure readings of a journey",
)
async def get_pressure_readings(
    spacecraft_name: str,
    journey_id: str,
    service: TelemetryServiceDep,
    page_size: int | None = PageSizeQuery,
    page_state: str | None = PageStateQuery,
) -> PagedResult:
    return await _read_page(
        service, TelemetryKind.PRESSURE, spacecraft_name, journey_id, page_size, page_state
    )


@router.get(
    "/speed",
    response_model=PagedResult[SpeedReading],
    summary="Speed readings of a journey",
)
async def get_speed_readings(
    spacecraft_name: str,
    journey_id: str,
    service: TelemetryServiceDep,
    page_size: int | None = PageSizeQuery,
    page_state: str | None = PageStateQuery,
) -> PagedResult:
    return await _read_page(
        service, TelemetryKind.SPEED, spacecraft_name, journey_id, page_size, page_state
    )


@router.get(
    "/location",
    response_model=PagedResult[LocationReading],
    summary="Location readings of a journey",
)
async def get_location_readings(
    spacecraft_name: str,
    journey_id: str,
    service: TelemetryServiceDep,
    page_size: int | None = PageSizeQuery,
    page_state: str | None = PageStateQuery,
) -> PagedResult:
    """Read one page of location readings (x/y/z coordinates)."""
    return await _read_page(
        service, TelemetryKind.LOCATION, spacecraft_name, journey_id, page_size, page_state
    )
