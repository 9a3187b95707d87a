"""Recording helpers over the Prometheus collectors.

Call sites pass domain values (kind, problem type, store operation); label
formatting lives here so collectors never see inconsistent label values.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from spacecraft_telemetry.infra.metrics import prometheus

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Count a problem response, labelled by its problem type.

    Example:
        track_error("invalid-cursor", "/api/spacecraft/gemini3/.../instruments/speed", 400)
    """
    prometheus.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()
    logger.debug(
        "Counted %s response (%s)",
        status_code,
        error_type,
        extra={"endpoint": endpoint, **(extra or {})},
    )


def track_unhandled_exception(exception_type: str, endpoint: str) -> None:
    prometheus.exceptions_unhandled_total.labels(
        exception_type=exception_type,
        endpoint=endpoint,
    ).inc()


def track_page_read(kind: str, rows: int, has_more: bool) -> None:
    """Count one served page and the rows in it; ``has_more`` is "true" or "false"."""
    prometheus.telemetry_pages_read_total.labels(
        kind=kind, has_more="true" if has_more else "false"
    ).inc()
    prometheus.telemetry_rows_returned_total.labels(kind=kind).inc(rows)


def track_store_error(kind: str, error_type: str) -> None:
    prometheus.store_errors_total.labels(kind=kind, error_type=error_type).inc()


@contextmanager
def track_store_request(operation: str) -> Iterator[None]:
    """Observe the wall time of one Cassandra round trip, failed or not."""
    started = time.perf_counter()
    try:
        yield
    finally:
        prometheus.store_request_duration_seconds.labels(operation=operation).observe(
            time.perf_counter() - started
        )
