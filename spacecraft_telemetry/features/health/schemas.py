"""Probe payloads for orchestrators and dashboards."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    # Process up, Cassandra session missing or lost
    DEGRADED = "degraded"


class _Probe(BaseModel):
    timestamp: datetime = Field(description="When the probe was answered (UTC)")


class HealthResponse(_Probe):
    """Service identity plus one boolean per backing store.

    ``checks`` is empty when the store integration is disabled.
    """

    status: HealthStatus
    service: str = Field(min_length=1, max_length=100)
    version: str = Field(min_length=1, max_length=50)
    checks: dict[str, bool] = Field(default_factory=dict, examples=[{"cassandra": True}])


class LivenessResponse(_Probe):
    alive: bool
    service: str = Field(min_length=1, max_length=100)


class ReadinessResponse(_Probe):
    """Served with 503 while any check is false."""

    ready: bool
    checks: dict[str, bool] = Field(default_factory=dict)
