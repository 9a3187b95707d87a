"""Partition-scoped query templates.

One generic builder renders and prepares the read query for any entity
schema. Plans are built once at startup and shared read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any, Generic

from spacecraft_telemetry.core.exceptions import SchemaMismatch
from spacecraft_telemetry.features.telemetry.entities import (
    ENTITY_SCHEMAS,
    JOURNEY_ID_COLUMN,
    SPACECRAFT_NAME_COLUMN,
    EntitySchema,
    R,
    TelemetryKind,
)

if TYPE_CHECKING:
    from spacecraft_telemetry.infra.cassandra.session import PagedStatementExecutor

logger = logging.getLogger(__name__)

REQUIRED_PARTITION_KEY = (SPACECRAFT_NAME_COLUMN, JOURNEY_ID_COLUMN)


@dataclass(frozen=True, slots=True)
class QueryPlan(Generic[R]):
    """A prepared, partition-scoped read for one telemetry kind.

    Attributes:
        schema: Descriptor the plan was built from
        cql: Rendered statement text
        statement: Store handle returned by ``prepare``
    """

    schema: EntitySchema[R]
    cql: str
    statement: Any

    @property
    def kind(self) -> TelemetryKind:
        return self.schema.kind

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return self.schema.partition_key


def render_select(schema: EntitySchema) -> str:
    """Render the partition-scoped SELECT for a schema.

    No ORDER BY: rows come back in the table's clustering order.

    Raises:
        SchemaMismatch: If the partition key is not (spacecraft_name, journey_id)
    """
    if schema.partition_key != REQUIRED_PARTITION_KEY:
        raise SchemaMismatch(
            f"Table {schema.table_name} is not partitioned by {', '.join(REQUIRED_PARTITION_KEY)}",
            extra={
                "table_name": schema.table_name,
                "partition_key": list(schema.partition_key),
            },
        )
    columns = ", ".join(schema.column_names)
    predicate = " AND ".join(f"{name} = :{name}" for name in schema.partition_key)
    return f"SELECT {columns} FROM {schema.table_name} WHERE {predicate}"


class QueryTemplateBuilder:
    """Prepare read plans against a store session.

    Example:
        >>> builder = QueryTemplateBuilder(store)
        >>> plans = builder.build_all()
        >>> plans[TelemetryKind.SPEED].cql
        'SELECT spacecraft_name, journey_id, reading_time, speed, speed_unit FROM ...'
    """

    def __init__(self, store: PagedStatementExecutor) -> None:
        self._store = store

    def build(self, schema: EntitySchema[R]) -> QueryPlan[R]:
        """Render and prepare the read query for one schema."""
        cql = render_select(schema)
        statement = self._store.prepare(cql)
        logger.debug("Prepared telemetry query", extra={"kind": schema.kind.value, "cql": cql})
        return QueryPlan(schema=schema, cql=cql, statement=statement)

    def build_all(self) -> dict[TelemetryKind, QueryPlan]:
        """Prepare a plan for every registered kind."""
        plans = {kind: self.build(schema) for kind, schema in ENTITY_SCHEMAS.items()}
        logger.info("Prepared telemetry queries", extra={"kinds": [k.value for k in plans]})
        return plans
