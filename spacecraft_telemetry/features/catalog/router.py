"""Journey catalog API router."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Request, Response, status

from spacecraft_telemetry.core.dependencies.services import CatalogServiceDep
from spacecraft_telemetry.features.catalog.schemas import Journey

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spacecrafts")


@router.get(
    "",
    response_model=list[Journey],
    summary="List all spacecraft journeys",
)
async def list_spacecrafts(service: CatalogServiceDep) -> list[Journey]:
    return await service.list_spacecrafts()


@router.get(
    "/{spacecraft_name}",
    response_model=list[Journey],
    summary="List journeys of a spacecraft",
)
async def list_journeys(spacecraft_name: str, service: CatalogServiceDep) -> list[Journey]:
    """List the journeys of one spacecraft (empty when the spacecraft is unknown)."""
    return await service.list_journeys(spacecraft_name)


@router.get(
    "/{spacecraft_name}/{journey_id}",
    response_model=Journey,
    summary="Get one journey",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Journey not found"}},
)
async def get_journey(
    spacecraft_name: str,
    journey_id: UUID,
    service: CatalogServiceDep,
) -> Journey:
    return await service.get_journey(spacecraft_name, journey_id)


@router.post(
    "/{spacecraft_name}",
    status_code=status.HTTP_201_CREATED,
    response_model=UUID,
    summary="Create a journey",
)
async def create_journey(
    spacecraft_name: str,
    request: Request,
    response: Response,
    service: CatalogServiceDep,
    summary: str = Body("", media_type="text/plain", description="Short journey description"),
) -> UUID:
    """Register a new journey for a spacecraft.

    The body is the plain-text summary. The response carries the new journey
    id and a ``Location`` header pointing at it.

    Example:
        ```bash
        curl -X POST http://localhost:8080/api/spacecrafts/gemini3 \\
          -H "Content-Type: text/plain" \\
          -d "Low orbit test flight"
        ```
    """
    journey_id = await service.create_journey(spacecraft_name, summary or None)
    response.headers["Location"] = str(
        request.url_for("get_journey", spacecraft_name=spacecraft_name, journey_id=str(journey_id))
    )
    return journey_id
