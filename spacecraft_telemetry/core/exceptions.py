"""Error taxonomy of the telemetry gateway.

Each class fixes the HTTP status and the RFC 7807 ``type`` it renders as;
raise sites only supply the human-readable detail and, optionally, context
(kind, partition key, page size) that ends up both in the log record and as
extension members of the problem body.
"""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Root of every error the API turns into a problem response.

    Attributes:
        status_code: HTTP status the error maps to.
        type: Problem type slug, stable across releases.
        title: Short summary shared by every occurrence of the type.
        detail: What went wrong this time.
        instance: Request path; filled in by the handler when left empty.
        extra: Context members merged into the problem body.

    Example:
        raise StoreUnavailable(
            "Store unavailable: all hosts down",
            extra={"kind": "speed", "spacecraft_name": "gemini3"},
        )
    """

    status_code: ClassVar[int] = 500
    type: ClassVar[str] = "internal-error"
    title: ClassVar[str] = "Internal Server Error"

    def __init__(
        self,
        detail: str,
        *,
        extra: dict[str, Any] | None = None,
        instance: str | None = None,
    ) -> None:
        self.detail = detail
        self.extra = extra or {}
        self.instance = instance
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.detail!r}, extra={self.extra!r})"


class ClientError(AppException):
    """The request itself is wrong; retrying it unchanged will fail again."""

    status_code = 400
    type = "bad-request"
    title = "Bad Request"


class InvalidArgument(ClientError):
    """Missing partition key part, malformed journey id or bad page size."""

    type = "invalid-argument"


class InvalidCursor(ClientError):
    """Page state that is not hex, is truncated, or belongs to another query."""

    type = "invalid-cursor"


class JourneyNotFound(AppException):
    status_code = 404
    type = "journey-not-found"
    title = "Not Found"


class UnknownEntityKind(AppException):
    """Lookup of a telemetry kind outside the registry.

    The router only accepts registered kinds, so seeing this over HTTP means
    a programming error.
    """

    type = "unknown-entity-kind"

    def __init__(self, kind: object) -> None:
        super().__init__(f"Unknown telemetry kind: {kind!r}", extra={"kind": str(kind)})


class SchemaMismatch(AppException):
    """Entity descriptor lacks the (spacecraft_name, journey_id) partition key."""

    type = "schema-mismatch"


class StoreError(AppException):
    """Cassandra rejected the query or returned rows of the wrong shape."""

    type = "store-error"


class StoreUnavailable(AppException):
    """No replica answered in time; the caller may retry later."""

    status_code = 503
    type = "store-unavailable"
    title = "Service Unavailable"


__all__ = [
    "AppException",
    "ClientError",
    "InvalidArgument",
    "InvalidCursor",
    "JourneyNotFound",
    "SchemaMismatch",
    "StoreError",
    "StoreUnavailable",
    "UnknownEntityKind",
]
