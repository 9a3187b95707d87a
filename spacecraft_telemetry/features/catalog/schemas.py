"""Journey catalog schemas."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Journey(BaseModel):
    """One journey of a spacecraft, as stored in ``spacecraft_journey_catalog``."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    spacecraft_name: str = Field(description="Spacecraft name (partition key)")
    journey_id: UUID = Field(description="Journey id (time-based UUID)")
    start: datetime | None = Field(default=None, description="Journey start (UTC)")
    end: datetime | None = Field(default=None, description="Planned journey end (UTC)")
    active: bool = Field(default=False, description="Whether the journey is in progress")
    summary: str | None = Field(default=None, description="Short description")

    @field_validator("start", "end")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
