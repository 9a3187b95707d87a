"""Prometheus collectors exposed on ``/metrics``."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Own registry: tests build many apps in one process
REGISTRY = CollectorRegistry()

# 1 ms to 10 s; a single page read is one round trip
STORE_LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

telemetry_pages_read_total = Counter(
    "telemetry_pages_read_total",
    "Telemetry pages served, by kind and whether a next page state was returned",
    ["kind", "has_more"],
    registry=REGISTRY,
)

telemetry_rows_returned_total = Counter(
    "telemetry_rows_returned_total",
    "Telemetry rows returned to callers",
    ["kind"],
    registry=REGISTRY,
)

store_request_duration_seconds = Histogram(
    "store_request_duration_seconds",
    "Cassandra round-trip latency in seconds",
    ["operation"],
    buckets=STORE_LATENCY_BUCKETS,
    registry=REGISTRY,
)

store_errors_total = Counter(
    "store_errors_total",
    "Failed page reads, by kind and problem type",
    ["kind", "error_type"],
    registry=REGISTRY,
)

errors_total = Counter(
    "errors_total",
    "Problem responses returned to clients",
    ["error_type", "endpoint", "status_code"],
    registry=REGISTRY,
)

exceptions_unhandled_total = Counter(
    "exceptions_unhandled_total",
    "Exceptions that reached the catch-all handler",
    ["exception_type", "endpoint"],
    registry=REGISTRY,
)
