"""Telemetry read service.

Holds one prepared plan per telemetry kind and the paged reader. Built once
in the application lifespan after the store session is started.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacecraft_telemetry.core.exceptions import UnknownEntityKind
from spacecraft_telemetry.features.telemetry.entities import TelemetryKind
from spacecraft_telemetry.features.telemetry.queries import QueryTemplateBuilder
from spacecraft_telemetry.features.telemetry.reader import PagedReader

if TYPE_CHECKING:
    from spacecraft_telemetry.core.settings.pagination import PaginationSettings
    from spacecraft_telemetry.features.telemetry.queries import QueryPlan
    from spacecraft_telemetry.features.telemetry.reader import PageRequest, PageResponse
    from spacecraft_telemetry.infra.cassandra.session import PagedStatementExecutor

logger = logging.getLogger(__name__)


class TelemetryService:
    """Single entry point for paged telemetry reads."""

    def __init__(self, plans: dict[TelemetryKind, QueryPlan], reader: PagedReader) -> None:
        self._plans = dict(plans)
        self._reader = reader

    @classmethod
    def from_store(
        cls,
        store: PagedStatementExecutor,
        pagination: PaginationSettings,
    ) -> TelemetryService:
        """Prepare every plan against ``store`` and wire the reader."""
        plans = QueryTemplateBuilder(store).build_all()
        reader = PagedReader(
            store,
            default_page_size=pagination.default_page_size,
            max_page_size=pagination.max_page_size,
        )
        return cls(plans, reader)

    @property
    def kinds(self) -> tuple[TelemetryKind, ...]:
        return tuple(self._plans)

    def plan_for(self, kind: TelemetryKind | str) -> QueryPlan:
        """Return the prepared plan for ``kind``.

        Raises:
            UnknownEntityKind: If no plan was prepared for ``kind``
        """
        try:
            return self._plans[TelemetryKind(kind)]
        except (KeyError, ValueError):
            raise UnknownEntityKind(kind) from None

    async def read(self, kind: TelemetryKind | str, request: PageRequest) -> PageResponse:
        return await self._reader.read(self.plan_for(kind), request)
