"""ASGI entrypoint: ``uvicorn spacecraft_telemetry.app.main:app``."""

from __future__ import annotations

from fastapi import FastAPI

from spacecraft_telemetry.app.exception_handlers import configure_exception_handlers
from spacecraft_telemetry.app.lifespan import lifespan
from spacecraft_telemetry.app.middleware import configure_middleware
from spacecraft_telemetry.app.router import setup_routers
from spacecraft_telemetry.core.settings import get_settings


def create_app() -> FastAPI:
    """Build the telemetry gateway.

    The Cassandra session is opened by the lifespan, not here, so importing
    this module (tests, OpenAPI export) never touches the network.
    """
    api = get_settings().app

    app = FastAPI(
        title=api.title,
        description=api.description,
        version=api.version,
        debug=api.debug,
        docs_url=api.docs_url,
        openapi_url=api.openapi_url,
        redoc_url=None,
        lifespan=lifespan,
    )
    configure_exception_handlers(app)
    configure_middleware(app)
    setup_routers(app, api)
    return app


app = create_app()
