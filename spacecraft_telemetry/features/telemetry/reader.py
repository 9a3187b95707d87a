"""Paged reads over a single telemetry partition.

A read binds the partition key, applies the page size and the decoded cursor,
performs exactly one store round trip and maps exactly the rows of that page.
Nothing is over-fetched, truncated or retried here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Generic
from uuid import UUID

from pydantic import ValidationError

from spacecraft_telemetry.core.exceptions import (
    InvalidArgument,
    InvalidCursor,
    StoreError,
    StoreUnavailable,
)
from spacecraft_telemetry.core.pagination import CursorCodec, PagedResult, cursor_scope
from spacecraft_telemetry.features.telemetry.entities import (
    JOURNEY_ID_COLUMN,
    SPACECRAFT_NAME_COLUMN,
    R,
)
from spacecraft_telemetry.infra.logging import get_lazy_logger, log_context
from spacecraft_telemetry.infra.metrics.tracking import track_page_read, track_store_error

if TYPE_CHECKING:
    from spacecraft_telemetry.features.telemetry.queries import QueryPlan
    from spacecraft_telemetry.infra.cassandra.session import PagedStatementExecutor

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__, component="paged_reader")

DEFAULT_PAGE_SIZE = 10
# fetch_size travels as a signed 32-bit int in the native protocol
MAX_FETCH_SIZE = 2**31 - 1


@dataclass(frozen=True, slots=True)
class PageRequest:
    """What the caller asked for.

    Attributes:
        spacecraft_name: Partition key, first component
        journey_id: Partition key, second component (time-based UUID)
        page_size: Rows per page; None applies the configured default
        cursor: pageState returned by a previous read of the same partition
    """

    spacecraft_name: str | None
    journey_id: UUID | str | None
    page_size: int | None = None
    cursor: str | None = None


@dataclass(frozen=True, slots=True)
class PageResponse(Generic[R]):
    """One page of records plus the cursor to continue from."""

    record_type: type[R]
    page_size: int
    items: tuple[R, ...] = field(default_factory=tuple)
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    def to_paged_result(self) -> PagedResult[R]:
        return PagedResult[self.record_type](  # type: ignore[name-defined]
            items=list(self.items),
            page_state=self.next_cursor,
            page_size=self.page_size,
        )


def _parse_journey_id(journey_id: UUID | str | None) -> UUID:
    if isinstance(journey_id, UUID):
        value = journey_id
    elif isinstance(journey_id, str) and journey_id.strip():
        try:
            value = UUID(journey_id.strip())
        except ValueError:
            raise InvalidArgument(
                "journeyId must be a time-based UUID",
                extra={"journey_id": journey_id},
            ) from None
    else:
        raise InvalidArgument("journeyId is required")

    if value.version != 1:
        raise InvalidArgument(
            "journeyId must be a time-based UUID",
            extra={"journey_id": str(value)},
        )
    return value


class PagedReader:
    """Execute prepared plans one page at a time.

    Example:
        >>> reader = PagedReader(store)
        >>> page = await reader.read(plans[TelemetryKind.TEMPERATURE], PageRequest("gemini3", journey_id))
        >>> while page.has_more:
        ...     page = await reader.read(plan, PageRequest("gemini3", journey_id, cursor=page.next_cursor))
    """

    def __init__(
        self,
        store: PagedStatementExecutor,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int | None = None,
    ) -> None:
        self._store = store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def effective_page_size(self, page_size: int | None) -> int:
        """Resolve the page size to apply.

        Raises:
            InvalidArgument: If page_size is zero, negative or above the maximum
        """
        if page_size is None:
            return self.default_page_size
        if isinstance(page_size, bool) or not isinstance(page_size, int):
            raise InvalidArgument("pageSize must be an integer", extra={"page_size": repr(page_size)})
        if page_size <= 0:
            raise InvalidArgument("pageSize must be a positive integer", extra={"page_size": page_size})
        limit = min(self.max_page_size or MAX_FETCH_SIZE, MAX_FETCH_SIZE)
        if page_size > limit:
            raise InvalidArgument(
                f"pageSize must not exceed {limit}",
                extra={"page_size": page_size, "max_page_size": limit},
            )
        return page_size

    async def read(self, plan: QueryPlan[R], request: PageRequest) -> PageResponse[R]:
        """Read one page of the partition named by ``request``.

        Raises:
            InvalidArgument: Missing spacecraft name, malformed journey id, bad page size
            InvalidCursor: Cursor malformed or issued for another kind/partition
            StoreUnavailable: Store unreachable or timed out
            StoreError: Store rejected the query or returned unreadable rows
        """
        kind = plan.kind.value

        # 1. Partition key
        spacecraft_name = (request.spacecraft_name or "").strip()
        if not spacecraft_name:
            raise InvalidArgument("spacecraftName is required")
        journey_id = _parse_journey_id(request.journey_id)
        params = {SPACECRAFT_NAME_COLUMN: spacecraft_name, JOURNEY_ID_COLUMN: journey_id}

        # 2. Page size
        page_size = self.effective_page_size(request.page_size)

        # 3. Cursor
        scope = cursor_scope(kind, spacecraft_name, journey_id)
        paging_state: bytes | None = None
        if request.cursor is not None:
            paging_state = CursorCodec.decode(request.cursor, scope=scope)
            if not paging_state:
                raise InvalidCursor("Page state is not valid: empty")

        context: dict[str, Any] = {
            "kind": kind,
            "spacecraft_name": spacecraft_name,
            "journey_id": str(journey_id),
        }

        # 4. Single store round trip
        try:
            with log_context(**context):
                page = await self._store.execute_page(
                    plan.statement,
                    params,
                    page_size=page_size,
                    paging_state=paging_state,
                )
        except (StoreUnavailable, StoreError) as exc:
            track_store_error(kind, exc.type)
            logger.warning(
                "Telemetry read failed",
                extra={**context, "error_type": exc.type, "detail": exc.detail},
            )
            raise type(exc)(exc.detail, extra={**exc.extra, **context}) from exc

        # 5. Exactly the rows of this page
        try:
            items = tuple(plan.schema.record_type.from_row(row) for row in page.rows)
        except ValidationError as exc:
            track_store_error(kind, "row-mapping")
            raise StoreError(
                f"Store returned rows that do not match the {kind} schema",
                extra={**context, "errors": exc.error_count()},
            ) from exc

        # 6. Continuation
        next_cursor = (
            CursorCodec.encode(page.paging_state, scope=scope)
            if page.paging_state
            else None
        )

        track_page_read(kind, len(items), next_cursor is not None)
        lazy_logger.debug(
            lambda: (
                f"Read {len(items)} {kind} rows for {spacecraft_name}/{journey_id} "
                f"(page_size={page_size}, continued={paging_state is not None}, more={next_cursor is not None})"
            )
        )

        return PageResponse(
            record_type=plan.schema.record_type,
            page_size=page_size,
            items=items,
            next_cursor=next_cursor,
        )
