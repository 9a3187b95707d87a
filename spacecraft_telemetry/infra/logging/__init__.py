"""Logging infrastructure.

Structured logging with:
- JSONL format for Loki/Elasticsearch ingestion
- Automatic context injection (request_id, kind, spacecraft, journey)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for per-page debug messages

Basic usage:
    import logging

    from spacecraft_telemetry.infra.logging import get_lazy_logger, log_context

    logger = logging.getLogger(__name__)
    lazy_logger = get_lazy_logger(__name__)

    with log_context(request_id="abc-123"):
        logger.info("Reading page")  # includes request_id
        lazy_logger.debug(lambda: f"state={state.hex()}")  # only built if DEBUG
"""

from spacecraft_telemetry.infra.logging.config import (
    configure_logging,
    setup_logging,
    shutdown,
)
from spacecraft_telemetry.infra.logging.context import (
    ContextInjectingFilter,
    bind_log_context,
    clear_log_context,
    get_log_context,
    log_context,
    reset_log_context,
)
from spacecraft_telemetry.infra.logging.formatters import JSONFormatter
from spacecraft_telemetry.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "bind_log_context",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "log_context",
    "reset_log_context",
    "setup_logging",
    "shutdown",
]
