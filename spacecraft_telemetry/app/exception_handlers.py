"""Problem-details rendering for every failure leaving the API.

Bodies are ``application/problem+json`` (RFC 7807). The problem ``type`` is
the slug of the raising class (``invalid-cursor``, ``store-unavailable``,
...) and the request ID set by RequestIDMiddleware is echoed as
``request_id`` so a caller's report can be matched to the log line.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from spacecraft_telemetry.core.exceptions import AppException
from spacecraft_telemetry.core.schemas.error import (
    ProblemDetail,
    ValidationError,
    ValidationProblemDetail,
)
from spacecraft_telemetry.infra.metrics import tracking

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"
# ProblemDetail.detail limit; driver messages can exceed it
MAX_DETAIL_LENGTH = 2000
# Metric label when no route matched (unknown path or instrument)
UNMATCHED_ENDPOINT = "unmatched"


def _endpoint_label(request: Request) -> str:
    """Route template for metric labels, e.g. ``/api/spacecraft/{spacecraft_name}/...``.

    Raw paths embed the spacecraft and journey, one series per journey.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


def _render(
    request: Request,
    problem: ProblemDetail,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = problem.model_dump(exclude_none=True)
    # Context members never shadow the standard problem fields
    for key, value in (extra or {}).items():
        body.setdefault(key, value)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(
        status_code=problem.status,
        content=jsonable_encoder(body),
        media_type=PROBLEM_JSON,
        headers=headers,
    )


def _problem(
    status_code: int,
    detail: str,
    instance: str,
    type_: str = "about:blank",
    title: str | None = None,
) -> ProblemDetail:
    return ProblemDetail(
        type=type_,
        title=title or ProblemDetail.default_title(status_code),
        status=status_code,
        detail=detail[:MAX_DETAIL_LENGTH],
        instance=instance,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render gateway errors: bad arguments, cursors, store failures, missing journeys."""
    path = request.url.path
    tracking.track_error(
        error_type=exc.type,
        endpoint=_endpoint_label(request),
        status_code=exc.status_code,
        extra={"detail": exc.detail},
    )

    # Caller mistakes are warnings; store and programming errors are errors
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "Request to %s failed with %s",
        path,
        exc.type,
        extra={
            "method": request.method,
            "status_code": exc.status_code,
            "detail": exc.detail,
            **{f"ctx_{key}": value for key, value in exc.extra.items()},
        },
    )

    problem = _problem(
        exc.status_code,
        exc.detail,
        instance=exc.instance or path,
        type_=exc.type,
        title=exc.title,
    )
    return _render(request, problem, extra=exc.extra)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject unparseable path or query parameters with 400 and per-field errors."""
    errors = [
        ValidationError(
            field=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
            type=error["type"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]
    path = request.url.path

    tracking.track_error(
        error_type="validation-error",
        endpoint=_endpoint_label(request),
        status_code=status.HTTP_400_BAD_REQUEST,
    )
    logger.warning(
        "Rejected %d invalid parameter(s) on %s",
        len(errors),
        path,
        extra={"method": request.method, "fields": [e.field for e in errors]},
    )

    problem = ValidationProblemDetail(
        type="validation-error",
        title="Bad Request",
        status=status.HTTP_400_BAD_REQUEST,
        detail=f"Request validation failed for {len(errors)} field(s)",
        instance=path,
        errors=errors,
    )
    return _render(request, problem)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path or kind, wrong method) as problems."""
    problem = _problem(exc.status_code, str(exc.detail), instance=request.url.path)
    return _render(request, problem, headers=exc.headers)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, answer 500 without leaking the message."""
    path = request.url.path
    tracking.track_unhandled_exception(
        exception_type=type(exc).__name__, endpoint=_endpoint_label(request)
    )
    logger.error(
        "Unhandled %s on %s",
        type(exc).__name__,
        path,
        extra={"method": request.method},
        exc_info=exc,
    )

    problem = _problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred while processing your request",
        instance=path,
        type_="internal-error",
    )
    return _render(request, problem)


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
