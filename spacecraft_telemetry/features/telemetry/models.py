"""Telemetry record types.

One immutable model per instrument; all share the partition key and the
reading timestamp. Rows arrive from the store as dicts keyed by column name
(``reading_time`` is exposed as ``recorded_at`` / ``recordedAt``).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

READING_TIME_COLUMN = "reading_time"


class TelemetryModel(BaseModel):
    """Base for telemetry payloads: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class TelemetryRecord(TelemetryModel):
    """Fields common to every instrument reading."""

    spacecraft_name: str = Field(description="Spacecraft the reading belongs to")
    journey_id: UUID = Field(description="Journey (time-based UUID)")
    recorded_at: datetime = Field(description="Reading timestamp (UTC)")

    @field_validator("recorded_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """The driver returns naive datetimes in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Self:
        """Build a record from a store row."""
        data = dict(row)
        if READING_TIME_COLUMN in data:
            data["recorded_at"] = data.pop(READING_TIME_COLUMN)
        return cls.model_validate(data)


class TemperatureReading(TelemetryRecord):
    temperature: float
    temperature_unit: str | None = None


class PressureReading(TelemetryRecord):
    pressure: float
    pressure_unit: str | None = None


class SpeedReading(TelemetryRecord):
    speed: float
    speed_unit: str | None = None


class Location(TelemetryModel):
    """Position in space, stored as the ``location_udt`` user type."""

    x_coordinate: float
    y_coordinate: float
    z_coordinate: float


class LocationReading(TelemetryRecord):
    location: Location
    location_unit: str | None = None


__all__ = [
    "Location",
    "LocationReading",
    "PressureReading",
    "SpeedReading",
    "TelemetryRecord",
    "TemperatureReading",
]
