"""Pagination settings for telemetry reads.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_PAGE_SIZE=10, PAGINATION_MAX_PAGE_SIZE=500
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Pagination configuration settings.

    Attributes:
        default_page_size: Page size applied when the caller does not send one.
        max_page_size: Upper bound on requested page sizes. None leaves only the
            protocol fetch-size limit (2**31-1);
            larger requests are rejected rather than clamped.
    """

    default_page_size: int = Field(
        default=10,
        ge=1,
        le=10000,
        description="Default page size when pageSize is not specified",
    )
    max_page_size: int | None = Field(
        default=None,
        ge=1,
        le=2**31 - 1,
        description="Maximum accepted page size (None leaves only the protocol limit of 2**31-1)",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
