"""Test utilities and helper functions.

Provides an in-memory stand-in for the Cassandra store session with the same
paging contract (ordered rows per page plus an opaque continuation token),
and factories for telemetry rows.

Usage:
    from tests.utils import InMemoryTelemetryStore, seed_readings

    store = InMemoryTelemetryStore()
    seed_readings(store, "temperature", "gemini3", JOURNEY_ID, count=25)
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
import re
from typing import Any
from uuid import UUID

from spacecraft_telemetry.core.exceptions import StoreError
from spacecraft_telemetry.infra.cassandra.session import StorePage

JOURNEY_ID = UUID("abb7c000-c310-11ac-8080-808080808080")
OTHER_JOURNEY_ID = UUID("bcc8d000-c310-11ac-8080-808080808080")
BASE_TIME = datetime(2024, 3, 1, 12, 0, 0)

_FROM_TABLE = re.compile(r"\bFROM (\w+)", re.IGNORECASE)
_INSERT_TABLE = re.compile(r"^INSERT INTO (\w+)", re.IGNORECASE)


class InMemoryTelemetryStore:
    """Fake store session implementing the paged executor surface.

    Paging state is the big-endian row offset, which keeps it opaque to the
    code under test while staying deterministic.

    Attributes:
        tables: Rows per table name
        prepared: Every CQL string passed to prepare()
        page_calls: Arguments of every execute_page() call
        executed: Every (cql, params) passed to execute()
        fail_with: Exception raised by the next store round trips, if set
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.prepared: list[str] = []
        self.page_calls: list[dict[str, Any]] = []
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.fail_with: Exception | None = None
        self.ready = True

    @property
    def is_ready(self) -> bool:
        return self.ready

    def prepare(self, cql: str) -> str:
        self.prepared.append(cql)
        return cql

    def insert(self, table: str, **row: Any) -> None:
        self.tables[table].append(row)

    async def execute_page(
        self,
        statement: str,
        params: dict[str, Any],
        *,
        page_size: int,
        paging_state: bytes | None = None,
    ) -> StorePage:
        self.page_calls.append(
            {
                "statement": statement,
                "params": dict(params),
                "page_size": page_size,
                "paging_state": paging_state,
            }
        )
        if self.fail_with is not None:
            raise self.fail_with

        offset = 0
        if paging_state is not None:
            if len(paging_state) != 4:
                raise StoreError("Invalid value for the paging state")
            offset = int.from_bytes(paging_state, "big")

        rows = self._matching_rows(statement, params)
        page = rows[offset : offset + page_size]
        next_offset = offset + len(page)
        next_state = next_offset.to_bytes(4, "big") if next_offset < len(rows) else None
        return StorePage(rows=[dict(row) for row in page], paging_state=next_state)

    async def fetch_all(
        self, statement: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        paging_state = None
        while True:
            page = await self.execute_page(
                statement, params or {}, page_size=5000, paging_state=paging_state
            )
            rows.extend(page.rows)
            if page.paging_state is None:
                return rows
            paging_state = page.paging_state

    async def execute(
        self, statement: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        self.executed.append((statement, dict(params or {})))
        if match := _INSERT_TABLE.match(statement):
            self.tables[match.group(1)].append(dict(params or {}))
        return []

    def _matching_rows(self, statement: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        match = _FROM_TABLE.search(statement)
        assert match, f"no table in {statement!r}"
        rows = [
            row
            for row in self.tables[match.group(1)]
            if all(row.get(key) == value for key, value in params.items())
        ]
        if rows and "reading_time" in rows[0]:
            rows.sort(key=lambda row: row["reading_time"])
        return rows


def reading_row(
    kind: str,
    spacecraft_name: str,
    journey_id: UUID,
    index: int,
) -> dict[str, Any]:
    """Build one stored row for a telemetry kind."""
    row: dict[str, Any] = {
        "spacecraft_name": spacecraft_name,
        "journey_id": journey_id,
        "reading_time": BASE_TIME + timedelta(seconds=index),
    }
    if kind == "temperature":
        row |= {"temperature": 20.0 + index, "temperature_unit": "C"}
    elif kind == "pressure":
        row |= {"pressure": 101.3 + index, "pressure_unit": "kPa"}
    elif kind == "speed":
        row |= {"speed": 7800.0 + index, "speed_unit": "m/s"}
    elif kind == "location":
        row |= {
            "location": {
                "x_coordinate": float(index),
                "y_coordinate": float(index) * 2,
                "z_coordinate": float(index) * 3,
            },
            "location_unit": "km",
        }
    else:
        raise ValueError(kind)
    return row


def seed_readings(
    store: InMemoryTelemetryStore,
    kind: str,
    spacecraft_name: str,
    journey_id: UUID,
    count: int,
    *,
    reverse: bool = False,
) -> list[dict[str, Any]]:
    """Insert ``count`` readings, optionally in reverse time order."""
    rows = [reading_row(kind, spacecraft_name, journey_id, i) for i in range(count)]
    for row in reversed(rows) if reverse else rows:
        store.insert(f"spacecraft_{kind}_over_time", **row)
    return rows
