"""Journey catalog service.

The catalog is small (a few thousand journeys at most) so reads are not
paged for the caller; the store session still follows paging states
internally.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from cassandra.util import uuid_from_time

from spacecraft_telemetry.core.exceptions import InvalidArgument, JourneyNotFound
from spacecraft_telemetry.features.catalog.schemas import Journey

if TYPE_CHECKING:
    from spacecraft_telemetry.infra.cassandra.session import PagedStatementExecutor

logger = logging.getLogger(__name__)

CATALOG_TABLE = "spacecraft_journey_catalog"
CATALOG_COLUMNS = ("spacecraft_name", "journey_id", "start", "end", "active", "summary")

# New journeys are scheduled to end this long after they start
JOURNEY_DURATION = timedelta(minutes=1000)

_COLUMNS = ", ".join(CATALOG_COLUMNS)
SELECT_ALL = f"SELECT {_COLUMNS} FROM {CATALOG_TABLE}"
SELECT_BY_SPACECRAFT = f"{SELECT_ALL} WHERE spacecraft_name = :spacecraft_name"
SELECT_ONE = f"{SELECT_BY_SPACECRAFT} AND journey_id = :journey_id"
INSERT_JOURNEY = (
    f"INSERT INTO {CATALOG_TABLE} ({_COLUMNS}) "
    "VALUES (:spacecraft_name, :journey_id, :start, :end, :active, :summary)"
)


def _require_name(spacecraft_name: str | None) -> str:
    name = (spacecraft_name or "").strip()
    if not name:
        raise InvalidArgument("spacecraftName is required")
    return name


class CatalogService:
    """Read and register spacecraft journeys."""

    def __init__(self, store: PagedStatementExecutor, statements: dict[str, Any]) -> None:
        self._store = store
        self._statements = statements

    @classmethod
    def from_store(cls, store: PagedStatementExecutor) -> CatalogService:
        """Prepare the catalog statements once."""
        statements = {
            "select_all": store.prepare(SELECT_ALL),
            "select_by_spacecraft": store.prepare(SELECT_BY_SPACECRAFT),
            "select_one": store.prepare(SELECT_ONE),
            "insert": store.prepare(INSERT_JOURNEY),
        }
        return cls(store, statements)

    async def list_spacecrafts(self) -> list[Journey]:
        """Every catalog row, all spacecraft."""
        rows = await self._store.fetch_all(self._statements["select_all"])
        return [Journey.model_validate(row) for row in rows]

    async def list_journeys(self, spacecraft_name: str) -> list[Journey]:
        """Journeys of one spacecraft; empty for an unknown spacecraft."""
        name = _require_name(spacecraft_name)
        rows = await self._store.fetch_all(
            self._statements["select_by_spacecraft"], {"spacecraft_name": name}
        )
        return [Journey.model_validate(row) for row in rows]

    async def get_journey(self, spacecraft_name: str, journey_id: UUID) -> Journey:
        """Fetch one journey.

        Raises:
            JourneyNotFound: If the journey does not exist
        """
        name = _require_name(spacecraft_name)
        rows = await self._store.fetch_all(
            self._statements["select_one"],
            {"spacecraft_name": name, "journey_id": journey_id},
        )
        if not rows:
            raise JourneyNotFound(
                f"Journey {journey_id} not found for spacecraft {name}",
                extra={"spacecraft_name": name, "journey_id": str(journey_id)},
            )
        return Journey.model_validate(rows[0])

    async def create_journey(self, spacecraft_name: str, summary: str | None) -> UUID:
        """Register a new, inactive journey starting now.

        Returns:
            The generated time-based journey id
        """
        name = _require_name(spacecraft_name)
        start = datetime.now(UTC)
        journey_id = uuid_from_time(start)
        await self._store.execute(
            self._statements["insert"],
            {
                "spacecraft_name": name,
                "journey_id": journey_id,
                "start": start,
                "end": start + JOURNEY_DURATION,
                "active": False,
                "summary": summary,
            },
        )
        logger.info(
            "Journey created",
            extra={"spacecraft_name": name, "journey_id": str(journey_id)},
        )
        return journey_id
