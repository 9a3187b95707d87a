"""ASGI middleware and its configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from spacecraft_telemetry.app.middleware.request_id import RequestIDMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def configure_middleware(app: FastAPI) -> None:
    """Register middleware on the application.

    Middleware added last runs first; the request ID must be set before any
    handler logs.
    """
    app.add_middleware(RequestIDMiddleware)
    logger.debug("Middleware configured", extra={"middleware": ["RequestIDMiddleware"]})


__all__ = ["RequestIDMiddleware", "configure_middleware"]
