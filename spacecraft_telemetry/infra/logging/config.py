"""Root logger wiring for the gateway and the CLI.

Every record goes through a single QueueHandler on the root logger. The
stream and rotating-file handlers run on a QueueListener thread, so a slow
disk or a blocked stderr never stalls the event loop while pages are being
read from Cassandra.
"""

from __future__ import annotations

import atexit
import logging
import logging.config
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from spacecraft_telemetry.infra.logging.context import ContextInjectingFilter
from spacecraft_telemetry.infra.logging.formatters import JSONFormatter

if TYPE_CHECKING:
    from spacecraft_telemetry.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
TEXT_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Loggers pinned below the root level; the driver is chatty at INFO
QUIET_LOGGERS = {"cassandra": "WARNING", "uvicorn.access": "WARNING"}

_listener: QueueListener | None = None
_configured = False


def shutdown() -> None:
    """Drain the queue and stop the listener thread. Idempotent."""
    global _listener

    listener, _listener = _listener, None
    if listener is not None:
        listener.stop()


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **overrides: Any,
) -> None:
    """Configure logging from LOG_* settings, once per process.

    The API lifespan passes ``force=True`` so a reloaded worker picks up
    changed settings; the CLI relies on the first call winning.
    """
    global _configured

    if _configured and not force:
        return

    if log_settings is None:
        from spacecraft_telemetry.core.settings import get_logging_settings

        log_settings = get_logging_settings()

    configure_logging(**(log_settings.to_logging_kwargs() | overrides))
    _configured = True


def configure_logging(
    log_level: str = "INFO",
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "spacecraft-telemetry",
    **unused: Any,
) -> None:
    """Replace the root handlers with a queue-backed pipeline.

    Args:
        log_level: Root level name, case-insensitive.
        file_path: JSONL or text log file; None keeps output on stderr only.
        json_logs: Render records with JSONFormatter instead of TEXT_FORMAT.
        console_enabled: Write to stderr.
        include_context: Copy request_id, kind and journey fields from the
            contextvars log context onto each record.
        capture_warnings: Route ``warnings.warn`` (e.g. driver deprecations)
            through the ``py.warnings`` logger.
        file_max_bytes: Rotation threshold for ``file_path``.
        file_backup_count: Rotated files kept next to ``file_path``.
        service_name: Value of the static ``service`` field in JSON output.
    """
    shutdown()
    logging.captureWarnings(capture_warnings)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "root": {"level": log_level.upper(), "handlers": []},
            "loggers": {name: {"level": level} for name, level in QUIET_LOGGERS.items()},
        }
    )

    formatter = _formatter(json_logs, service_name)
    sinks: list[logging.Handler] = []
    if console_enabled:
        sinks.append(logging.StreamHandler())
    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(
            RotatingFileHandler(
                path,
                maxBytes=file_max_bytes,
                backupCount=file_backup_count,
                encoding="utf-8",
            )
        )
    for sink in sinks:
        sink.setFormatter(formatter)

    _install_queue(sinks, include_context)

    if unused:
        logger.debug("Ignoring unknown logging options: %s", ", ".join(sorted(unused)))


def _formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    if not json_logs:
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATEFMT)
    return JSONFormatter(static={"service": service_name})


def _install_queue(sinks: list[logging.Handler], include_context: bool) -> None:
    global _listener

    queue: Queue[logging.LogRecord] = Queue()
    entry = QueueHandler(queue)
    # Enrich on the emitting task, before the record crosses to the listener thread
    if include_context:
        entry.addFilter(ContextInjectingFilter())

    root = logging.getLogger()
    for stale in [h for h in root.handlers if isinstance(h, QueueHandler)]:
        root.removeHandler(stale)
    root.addHandler(entry)

    if sinks:
        _listener = QueueListener(queue, *sinks, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)
