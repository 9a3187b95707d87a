"""Entity schema descriptors for the telemetry tables.

Each telemetry kind maps to one ``spacecraft_<kind>_over_time`` table
partitioned by ``(spacecraft_name, journey_id)`` and clustered by
``reading_time`` ascending. Descriptors are built at import time and never
change.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from spacecraft_telemetry.core.exceptions import UnknownEntityKind
from spacecraft_telemetry.features.telemetry.models import (
    READING_TIME_COLUMN,
    LocationReading,
    PressureReading,
    SpeedReading,
    TelemetryRecord,
    TemperatureReading,
)

R = TypeVar("R", bound=TelemetryRecord)

SPACECRAFT_NAME_COLUMN = "spacecraft_name"
JOURNEY_ID_COLUMN = "journey_id"


class TelemetryKind(str, Enum):
    """Instrument whose readings are stored in a telemetry table."""

    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    SPEED = "speed"
    LOCATION = "location"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True, slots=True)
class Column:
    name: str
    cql_type: str


@dataclass(frozen=True, slots=True)
class ClusteringColumn:
    name: str
    cql_type: str
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True, slots=True)
class EntitySchema(Generic[R]):
    """Static description of one telemetry table.

    Attributes:
        kind: Telemetry kind served by the table
        table_name: Unqualified table name
        partition_columns: Partition key, in key order
        clustering_columns: Clustering key, in key order
        value_columns: Remaining columns
        record_type: Model each row maps to
    """

    kind: TelemetryKind
    table_name: str
    partition_columns: tuple[Column, ...]
    clustering_columns: tuple[ClusteringColumn, ...]
    value_columns: tuple[Column, ...]
    record_type: type[R]

    @property
    def partition_key(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.partition_columns)

    @property
    def columns(self) -> tuple[Column | ClusteringColumn, ...]:
        """All columns: partition, then clustering, then values."""
        return (*self.partition_columns, *self.clustering_columns, *self.value_columns)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)


_PARTITION = (
    Column(SPACECRAFT_NAME_COLUMN, "text"),
    Column(JOURNEY_ID_COLUMN, "timeuuid"),
)
_CLUSTERING = (ClusteringColumn(READING_TIME_COLUMN, "timestamp"),)


def _over_time(kind: TelemetryKind, values: tuple[Column, ...], record_type: type[R]) -> EntitySchema[R]:
    return EntitySchema(
        kind=kind,
        table_name=f"spacecraft_{kind.value}_over_time",
        partition_columns=_PARTITION,
        clustering_columns=_CLUSTERING,
        value_columns=values,
        record_type=record_type,
    )


TEMPERATURE_SCHEMA: EntitySchema[TemperatureReading] = _over_time(
    TelemetryKind.TEMPERATURE,
    (Column("temperature", "float"), Column("temperature_unit", "text")),
    TemperatureReading,
)
PRESSURE_SCHEMA: EntitySchema[PressureReading] = _over_time(
    TelemetryKind.PRESSURE,
    (Column("pressure", "float"), Column("pressure_unit", "text")),
    PressureReading,
)
SPEED_SCHEMA: EntitySchema[SpeedReading] = _over_time(
    TelemetryKind.SPEED,
    (Column("speed", "double"), Column("speed_unit", "text")),
    SpeedReading,
)
LOCATION_SCHEMA: EntitySchema[LocationReading] = _over_time(
    TelemetryKind.LOCATION,
    (Column("location", "frozen<location_udt>"), Column("location_unit", "text")),
    LocationReading,
)

ENTITY_SCHEMAS: dict[TelemetryKind, EntitySchema] = {
    schema.kind: schema
    for schema in (TEMPERATURE_SCHEMA, PRESSURE_SCHEMA, SPEED_SCHEMA, LOCATION_SCHEMA)
}


def get_entity_schema(kind: TelemetryKind | str) -> EntitySchema:
    """Look up the descriptor for a telemetry kind.

    Raises:
        UnknownEntityKind: If no descriptor is registered for ``kind``
    """
    try:
        return ENTITY_SCHEMAS[TelemetryKind(kind)]
    except (KeyError, ValueError):
        raise UnknownEntityKind(kind) from None
