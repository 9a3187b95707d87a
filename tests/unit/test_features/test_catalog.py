"""Tests for the journey catalog service and endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

import pytest

from spacecraft_telemetry.core.exceptions import InvalidArgument, JourneyNotFound
from spacecraft_telemetry.features.catalog.service import CATALOG_TABLE, INSERT_JOURNEY
from tests.utils import JOURNEY_ID, OTHER_JOURNEY_ID


def _journey(store, spacecraft_name: str, journey_id: UUID, summary: str | None = None) -> None:
    start = datetime(2024, 3, 1, 12, 0, 0)
    store.insert(
        CATALOG_TABLE,
        spacecraft_name=spacecraft_name,
        journey_id=journey_id,
        start=start,
        end=start + timedelta(minutes=1000),
        active=True,
        summary=summary,
    )


class TestCatalogService:
    @pytest.mark.asyncio
    async def test_list_spacecrafts(self, store, catalog_service) -> None:
        _journey(store, "gemini3", JOURNEY_ID)
        _journey(store, "apollo11", OTHER_JOURNEY_ID)

        journeys = await catalog_service.list_spacecrafts()

        assert {j.spacecraft_name for j in journeys} == {"gemini3", "apollo11"}

    @pytest.mark.asyncio
    async def test_list_journeys_of_unknown_spacecraft_is_empty(self, store, catalog_service) -> None:
        _journey(store, "gemini3", JOURNEY_ID)

        assert await catalog_service.list_journeys("vostok1") == []

    @pytest.mark.asyncio
    async def test_list_journeys_requires_name(self, catalog_service) -> None:
        with pytest.raises(InvalidArgument):
            await catalog_service.list_journeys("  ")

    @pytest.mark.asyncio
    async def test_get_journey(self, store, catalog_service) -> None:
        _journey(store, "gemini3", JOURNEY_ID, summary="orbit")
        _journey(store, "gemini3", OTHER_JOURNEY_ID)

        journey = await catalog_service.get_journey("gemini3", JOURNEY_ID)

        assert journey.journey_id == JOURNEY_ID
        assert journey.summary == "orbit"
        assert journey.start.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_missing_journey_raises_not_found(self, catalog_service) -> None:
        with pytest.raises(JourneyNotFound) as exc_info:
            await catalog_service.get_journey("gemini3", JOURNEY_ID)
        assert exc_info.value.type == "journey-not-found"

    @pytest.mark.asyncio
    async def test_create_journey_inserts_inactive_time_based_row(self, store, catalog_service) -> None:
        journey_id = await catalog_service.create_journey("gemini3", "test flight")

        assert journey_id.version == 1
        statement, params = store.executed[-1]
        assert statement == INSERT_JOURNEY
        assert params["journey_id"] == journey_id
        assert params["active"] is False
        assert params["end"] - params["start"] == timedelta(minutes=1000)

        created = await catalog_service.get_journey("gemini3", journey_id)
        assert created.summary == "test flight"


class TestCatalogRouter:
    @pytest.mark.asyncio
    async def test_list_spacecrafts(self, client, store) -> None:
        _journey(store, "gemini3", JOURNEY_ID)

        response = await client.get("/api/spacecrafts")

        assert response.status_code == 200
        (journey,) = response.json()
        assert journey["spacecraftName"] == "gemini3"
        assert journey["journeyId"] == str(JOURNEY_ID)
        assert journey["active"] is True

    @pytest.mark.asyncio
    async def test_list_journeys(self, client, store) -> None:
        _journey(store, "gemini3", JOURNEY_ID)
        _journey(store, "apollo11", OTHER_JOURNEY_ID)

        response = await client.get("/api/spacecrafts/apollo11")

        assert response.status_code == 200
        assert [j["journeyId"] for j in response.json()] == [str(OTHER_JOURNEY_ID)]

    @pytest.mark.asyncio
    async def test_get_unknown_journey_is_404(self, client) -> None:
        response = await client.get(f"/api/spacecrafts/gemini3/{JOURNEY_ID}")

        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "journey-not-found"
        assert body["journey_id"] == str(JOURNEY_ID)

    @pytest.mark.asyncio
    async def test_get_journey_with_malformed_id_is_400(self, client) -> None:
        response = await client.get("/api/spacecrafts/gemini3/nope")

        assert response.status_code == 400
        assert response.json()["type"] == "validation-error"

    @pytest.mark.asyncio
    async def test_create_journey(self, client) -> None:
        response = await client.post(
            "/api/spacecrafts/gemini3",
            content="Low orbit test flight",
            headers={"Content-Type": "text/plain"},
        )

        assert response.status_code == 201
        journey_id = response.json()
        assert UUID(journey_id).version == 1
        assert response.headers["location"].endswith(f"/api/spacecrafts/gemini3/{journey_id}")

        created = await client.get(response.headers["location"])
        assert created.status_code == 200
        assert created.json()["summary"] == "Low orbit test flight"
        assert created.json()["active"] is False
