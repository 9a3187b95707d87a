"""Context management for structured logging.

Request-scoped fields (request_id, telemetry kind, spacecraft, journey) are
kept in a ContextVar and copied onto every LogRecord by
ContextInjectingFilter, so call sites never pass them explicitly. Each
asyncio task sees its own copy; ``log_context`` restores the previous fields
on exit, so nested scopes (request, then read) unwind cleanly.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def bind_log_context(**fields: Any) -> Token[dict[str, Any]]:
    """Add fields to the current task's context.

    Returns:
        Token for reset_log_context()
    """
    return _log_context.set({**_log_context.get(), **fields})


def reset_log_context(token: Token[dict[str, Any]]) -> None:
    """Restore the context that was current before bind_log_context()."""
    _log_context.reset(token)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind fields for the duration of a block.

    Example:
        ```python
        with log_context(kind="speed", spacecraft_name="gemini3"):
            logger.info("Reading page")  # record carries kind and spacecraft_name
        ```
    """
    token = bind_log_context(**fields)
    try:
        yield
    finally:
        reset_log_context(token)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the contextvars log context onto each record.

    Attached to the root QueueHandler by configure_logging(), so records from
    every module pass through it. Fields given explicitly via ``extra=`` win.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
