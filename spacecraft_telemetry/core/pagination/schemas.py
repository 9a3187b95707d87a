"""Pagination response envelope.

The envelope mirrors the page shape the store hands back: the items of one
page, the cursor to resume from (absent on the last page) and the page size
that was actually applied.

Usage:
    @router.get("/{kind}", response_model=PagedResult[TemperatureReading])
    async def read_page(page_size: int | None = None, page_state: str | None = None):
        ...

Client navigation:
    # First page
    GET /api/spacecraft/gemini3/<journey>/instruments/temperature?pageSize=10

    # Next page (using pageState from previous response)
    GET /api/spacecraft/gemini3/<journey>/instruments/temperature?pageSize=10&pageState=9a3f...
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    """One page of a partition-scoped scan.

    Attributes:
        items: Records of this page, in clustering order
        page_state: Cursor for the next page, None once the partition is exhausted
        page_size: Effective page size applied to this read
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    items: list[T] = Field(
        default_factory=list,
        description="Records of this page",
    )
    page_state: str | None = Field(
        default=None,
        description="Opaque cursor to request the next page (absent on the last page)",
    )
    page_size: int = Field(
        description="Effective page size",
    )

    @property
    def has_more(self) -> bool:
        """Whether another page can be requested."""
        return self.page_state is not None
