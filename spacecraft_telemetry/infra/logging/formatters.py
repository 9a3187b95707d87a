"""JSON Lines rendering of log records."""
from __future__ import annotations

from datetime import UTC, datetime
import json
import logging
from typing import Any

from opentelemetry import trace

# Attributes every LogRecord has; anything else on the record came from
# ``extra=`` or the context filter and is emitted as a top-level field
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message"}

DEFAULT_FIELDS = {"level": "levelname", "logger": "name", "message": "message"}


def _json_default(value: Any) -> Any:
    # Paging states render as hex, like the pageState the API hands out
    if isinstance(value, (bytes, bytearray)):
        return value.hex()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per line, timestamps in UTC with a ``Z`` suffix.

    ``fields`` maps output keys to LogRecord attributes; ``static`` is merged
    into every line (the service name). Records emitted inside an active
    OpenTelemetry span carry ``trace_id`` and ``span_id``.

    Example output:
        ```json
        {"level": "INFO", "logger": "spacecraft_telemetry.features.telemetry.reader", "message": "Read page", "timestamp": "2026-01-01T00:00:00.123Z", "service": "spacecraft-telemetry", "kind": "temperature", "rows": 10}
        ```
    """

    def __init__(
        self,
        fields: dict[str, str] | None = None,
        static: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.fields = fields or DEFAULT_FIELDS
        self.static = static or {}

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        out: dict[str, Any] = {key: getattr(record, attr, None) for key, attr in self.fields.items()}
        out["timestamp"] = (
            datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            out["trace_id"] = format(span_context.trace_id, "032x")
            out["span_id"] = format(span_context.span_id, "016x")

        # Newlines escaped so a traceback stays on one line
        if record.exc_info:
            out["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")
        if record.stack_info:
            out["stack_trace"] = record.stack_info.replace("\n", "\\n")

        out.update(self.static)
        for key, value in vars(record).items():
            if key not in _RESERVED and key not in out:
                out[key] = value

        return json.dumps(out, ensure_ascii=False, default=_json_default)
