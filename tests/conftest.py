"""Pytest configuration and shared fixtures.

Organization:
    - Application Fixtures: FastAPI app wired to the in-memory store, HTTP client
    - Service Fixtures: store, reader and services for unit tests
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import os

from httpx import ASGITransport, AsyncClient
import pytest

# Ensure tests run without external infrastructure
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("CASSANDRA_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "false")

from spacecraft_telemetry.core.settings import PaginationSettings  # noqa: E402
from spacecraft_telemetry.features.catalog.service import CatalogService  # noqa: E402
from spacecraft_telemetry.features.telemetry.reader import PagedReader  # noqa: E402
from spacecraft_telemetry.features.telemetry.service import TelemetryService  # noqa: E402
from tests.utils import InMemoryTelemetryStore  # noqa: E402

# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def store() -> InMemoryTelemetryStore:
    """Empty in-memory store."""
    return InMemoryTelemetryStore()


@pytest.fixture
def reader(store: InMemoryTelemetryStore) -> PagedReader:
    return PagedReader(store)


@pytest.fixture
def telemetry_service(store: InMemoryTelemetryStore) -> TelemetryService:
    """Telemetry service with plans prepared against the in-memory store."""
    return TelemetryService.from_store(store, PaginationSettings())


@pytest.fixture
def catalog_service(store: InMemoryTelemetryStore) -> CatalogService:
    return CatalogService.from_store(store)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(store, telemetry_service, catalog_service):
    """Create a FastAPI application wired to the in-memory store.

    ASGITransport does not run the lifespan, so the state it would set up is
    attached here.
    """
    from spacecraft_telemetry.app.main import create_app

    application = create_app()
    application.state.store = store
    application.state.telemetry_service = telemetry_service
    application.state.catalog_service = catalog_service
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for the application.

    Example:
        async def test_health_check(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
