"""Tests for application exception handlers."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

from fastapi.exceptions import RequestValidationError
import pytest
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from spacecraft_telemetry.app.exception_handlers import (
    PROBLEM_JSON,
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from spacecraft_telemetry.core.exceptions import (
    InvalidCursor,
    StoreError,
    StoreUnavailable,
    UnknownEntityKind,
)


def _build_request(path: str = "/test", request_id: str | None = None) -> Request:
    """Create a minimal ASGI request for handler tests."""
    scope: dict[str, Any] = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": [],
        "query_string": b"",
        "client": ("test", 1234),
        "server": ("test", 80),
        "state": {},
    }
    if request_id:
        scope["state"]["request_id"] = request_id
    return Request(scope, lambda: None)


def _body(response) -> dict[str, Any]:
    return json.loads(response.body)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "status_code", "problem_type"),
    [
        (InvalidCursor("Page state is not valid"), 400, "invalid-cursor"),
        (StoreUnavailable("All hosts down"), 503, "store-unavailable"),
        (StoreError("Rejected"), 500, "store-error"),
        (UnknownEntityKind("humidity"), 500, "unknown-entity-kind"),
    ],
)
async def test_app_exception_handler_renders_problem_details(
    exc, status_code: int, problem_type: str, monkeypatch: pytest.MonkeyPatch,
) -> None:
    """App exceptions produce RFC 7807 responses and track metrics."""
    tracked: dict[str, Any] = {}

    def fake_track_error(**payload: Any) -> None:
        tracked.update(payload)

    monkeypatch.setattr(
        "spacecraft_telemetry.app.exception_handlers.tracking.track_error",
        fake_track_error,
    )

    response = await app_exception_handler(_build_request("/api/x"), exc)

    assert response.status_code == status_code
    assert response.media_type == PROBLEM_JSON
    body = _body(response)
    assert body["type"] == problem_type
    assert body["status"] == status_code
    assert body["instance"] == "/api/x"
    assert tracked == {
        "error_type": problem_type,
        "endpoint": "unmatched",
        "status_code": status_code,
        "extra": {"detail": exc.detail},
    }


@pytest.mark.asyncio
async def test_extra_members_do_not_override_problem_fields() -> None:
    exc = StoreUnavailable("down", extra={"kind": "speed", "status": 200})

    body = _body(await app_exception_handler(_build_request(), exc))

    assert body["kind"] == "speed"
    assert body["status"] == 503


@pytest.mark.asyncio
async def test_request_id_is_included() -> None:
    response = await app_exception_handler(
        _build_request(request_id="abc-123"), InvalidCursor("bad")
    )

    assert _body(response)["request_id"] == "abc-123"


@pytest.mark.asyncio
async def test_validation_handler_returns_400_with_field_errors() -> None:
    exc = RequestValidationError(
        [
            {
                "loc": ("query", "pageSize"),
                "msg": "Input should be a valid integer",
                "type": "int_parsing",
                "input": "abc",
            }
        ]
    )

    response = await validation_exception_handler(_build_request(), exc)

    assert response.status_code == 400
    body = _body(response)
    assert body["type"] == "validation-error"
    assert body["errors"] == [
        {
            "field": "query.pageSize",
            "message": "Input should be a valid integer",
            "type": "int_parsing",
            "value": "abc",
        }
    ]


@pytest.mark.asyncio
async def test_http_exception_handler_keeps_status() -> None:
    response = await http_exception_handler(
        _build_request("/nope"), StarletteHTTPException(status_code=404, detail="Not Found")
    )

    assert response.status_code == 404
    assert response.media_type == PROBLEM_JSON
    assert _body(response)["title"] == "Not Found"


@pytest.mark.asyncio
async def test_generic_exception_handler_hides_details(monkeypatch: pytest.MonkeyPatch) -> None:
    tracked: dict[str, Any] = {}
    monkeypatch.setattr(
        "spacecraft_telemetry.app.exception_handlers.tracking.track_unhandled_exception",
        lambda **payload: tracked.update(payload),
    )

    response = await generic_exception_handler(_build_request(), RuntimeError("secret detail"))

    assert response.status_code == 500
    body = _body(response)
    assert body["type"] == "internal-error"
    assert "secret" not in body["detail"]
    assert tracked == {"exception_type": "RuntimeError", "endpoint": "unmatched"}


@pytest.mark.asyncio
async def test_error_metrics_use_route_template(monkeypatch: pytest.MonkeyPatch) -> None:
    tracked: dict[str, Any] = {}
    monkeypatch.setattr(
        "spacecraft_telemetry.app.exception_handlers.tracking.track_error",
        lambda **payload: tracked.update(payload),
    )
    request = _build_request("/api/spacecraft/gemini3/abb7c000-c310-11ac-8080-808080808080/instruments/speed")
    request.scope["route"] = SimpleNamespace(
        path="/api/spacecraft/{spacecraft_name}/{journey_id}/instruments/speed"
    )

    response = await app_exception_handler(request, InvalidCursor("bad"))

    assert tracked["endpoint"] == "/api/spacecraft/{spacecraft_name}/{journey_id}/instruments/speed"
    assert _body(response)["instance"] == request.url.path
