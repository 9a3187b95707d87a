"""CQL schema for the catalog and the telemetry tables.

Statements are idempotent (``IF NOT EXISTS``) and applied in order: user
type, catalog, then one table per telemetry kind. The telemetry tables are
rendered from the entity schema descriptors so the read queries and the DDL
can never disagree on column names.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacecraft_telemetry.features.catalog.service import CATALOG_TABLE
from spacecraft_telemetry.features.telemetry.entities import ENTITY_SCHEMAS, EntitySchema
from spacecraft_telemetry.infra.cassandra.session import LOCATION_UDT

if TYPE_CHECKING:
    from spacecraft_telemetry.infra.cassandra.session import CassandraStore

logger = logging.getLogger(__name__)

CREATE_LOCATION_TYPE = (
    f"CREATE TYPE IF NOT EXISTS {LOCATION_UDT} ("
    "x_coordinate double, y_coordinate double, z_coordinate double)"
)

CREATE_CATALOG_TABLE = (
    f"CREATE TABLE IF NOT EXISTS {CATALOG_TABLE} ("
    "spacecraft_name text, journey_id timeuuid, start timestamp, end timestamp, "
    "active boolean, summary text, "
    "PRIMARY KEY ((spacecraft_name), journey_id)"
    ") WITH CLUSTERING ORDER BY (journey_id DESC)"
)


def render_create_keyspace(keyspace: str, replication_factor: int) -> str:
    return (
        f"CREATE KEYSPACE IF NOT EXISTS {keyspace} WITH replication = "
        f"{{'class': 'SimpleStrategy', 'replication_factor': {replication_factor}}}"
    )


def render_create_table(schema: EntitySchema) -> str:
    """Render the CREATE TABLE statement for a telemetry table."""
    columns = ", ".join(f"{column.name} {column.cql_type}" for column in schema.columns)
    partition = ", ".join(column.name for column in schema.partition_columns)
    clustering = ", ".join(column.name for column in schema.clustering_columns)
    order = ", ".join(
        f"{column.name} {column.order.value}" for column in schema.clustering_columns
    )
    return (
        f"CREATE TABLE IF NOT EXISTS {schema.table_name} ({columns}, "
        f"PRIMARY KEY (({partition}), {clustering})"
        f") WITH CLUSTERING ORDER BY ({order})"
    )


def schema_statements() -> list[str]:
    """All DDL statements in the order they must be applied."""
    return [
        CREATE_LOCATION_TYPE,
        CREATE_CATALOG_TABLE,
        *(render_create_table(schema) for schema in ENTITY_SCHEMAS.values()),
    ]


async def ensure_schema(store: CassandraStore, *, create_keyspace: bool = True) -> list[str]:
    """Provision the keyspace (optional) and every table on a started store.

    The store must have been started with ``use_keyspace=False`` when the
    keyspace may not exist yet. Astra keyspaces are created outside CQL, so
    ``create_keyspace`` is ignored for secure connect bundle connections.

    Returns:
        The statements that were executed
    """
    settings = store.settings
    executed: list[str] = []

    if create_keyspace and not settings.uses_cloud_bundle:
        statement = render_create_keyspace(settings.keyspace, settings.replication_factor)
        await store.execute(statement)
        executed.append(statement)

    await store.set_keyspace(settings.keyspace)

    for statement in schema_statements():
        logger.info("Applying schema statement", extra={"cql": statement})
        await store.execute(statement)
        executed.append(statement)

    store.register_location_type()
    logger.info(
        "Schema provisioned",
        extra={"keyspace": settings.keyspace, "statements": len(executed)},
    )
    return executed
