"""Lazy evaluation support for logging.

Per-page debug lines are built from lambdas and only rendered when DEBUG is
enabled for the logger, so the hot read path pays nothing in production.
"""

from __future__ import annotations

import logging
from typing import Any


class LazyLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that renders callable messages on demand.

    Fields bound at construction are merged into each call's ``extra``
    (explicit ``extra`` keys win), unlike the stock adapter which replaces it.

    Example:
        ```python
        logger = get_lazy_logger(__name__, component="paged_reader")
        logger.debug(lambda: f"rows={len(rows)} state={state.hex()}")
        ```
    """

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        if callable(msg):
            msg = msg()
        super().log(level, msg, *(arg() if callable(arg) else arg for arg in args), **kwargs)

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        if self.extra:
            kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_lazy_logger(name: str, **bound: Any) -> LazyLoggerAdapter:
    """Get a lazy logger for ``name`` with optional bound fields."""
    return LazyLoggerAdapter(logging.getLogger(name), bound)
