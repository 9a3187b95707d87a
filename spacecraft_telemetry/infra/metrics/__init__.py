"""Prometheus metrics and tracking helpers."""

from spacecraft_telemetry.infra.metrics.prometheus import REGISTRY

__all__ = ["REGISTRY"]
