"""Request ID middleware for per-request tracking.

The request ID is taken from the ``X-Request-ID`` header or generated. It is
stored in ``request.state.request_id``, bound into the logging context for the
duration of the request and echoed back in the response headers. Problem
detail bodies carry it too.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
import uuid

from starlette.datastructures import MutableHeaders

from spacecraft_telemetry.infra.logging.context import log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

HEADER_NAME = "x-request-id"
STATE_KEY = "request_id"

# Inbound IDs are echoed into logs and headers; keep them short and printable
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")


def generate_request_id() -> str:
    return str(uuid.uuid4())


class RequestIDMiddleware:
    """Pure ASGI middleware adding a request ID to every HTTP request.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/")
        async def root(request: Request):
            return {"request_id": request.state.request_id}
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._extract_or_generate(scope)
        scope.setdefault("state", {})[STATE_KEY] = request_id

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(HEADER_NAME, request_id)
            await send(message)

        with log_context(request_id=request_id):
            await self.app(scope, receive, send_with_header)

    @staticmethod
    def _extract_or_generate(scope: Scope) -> str:
        for name, value in scope.get("headers", []):
            if name == HEADER_NAME.encode("latin-1"):
                candidate = value.decode("latin-1").strip()
                if _VALID_REQUEST_ID.match(candidate):
                    return candidate
                break
        return generate_request_id()
