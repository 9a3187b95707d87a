"""RFC 7807 Problem Details schemas for error responses.

See: https://datatracker.ietf.org/doc/html/rfc7807
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_DEFAULT_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    415: "Unsupported Media Type",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Example:
        return JSONResponse(
            status_code=400,
            content=ProblemDetail(
                type="invalid-cursor",
                title="Bad Request",
                status=400,
                detail="Page state is not valid: odd number of hex digits",
            ).model_dump(exclude_none=True),
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "invalid-argument",
                "title": "Bad Request",
                "status": 400,
                "detail": "pageSize must be a positive integer",
                "instance": "/api/spacecraft/gemini3/abb7c000-c310-11ac-8080-808080808080/instruments/speed",
            }
        },
        str_strip_whitespace=True,
    )

    @staticmethod
    def default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        return _DEFAULT_TITLES.get(status_code, "Error")


class ValidationError(BaseModel):
    """A single field-level validation failure."""

    field: str = Field(description="Dotted location of the offending input")
    message: str = Field(description="Validation message")
    type: str = Field(description="Validation error type")
    value: Any | None = Field(default=None, description="Rejected input value")


class ValidationProblemDetail(ProblemDetail):
    """Problem details carrying field-level validation errors."""

    errors: list[ValidationError] = Field(
        default_factory=list,
        description="Field-level validation errors",
    )
