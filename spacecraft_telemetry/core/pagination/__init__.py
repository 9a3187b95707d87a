"""Cursor-based pagination over the store's native paging state.

Pages are produced by the backing store; this package only turns its opaque
continuation token into a transport-safe cursor and back, and defines the
response envelope.

REST usage:
    @router.get("/items", response_model=PagedResult[ItemResponse])
    async def list_items(...) -> PagedResult[ItemResponse]:
        page = await reader.read(plan, request)
        return page.to_paged_result()

Cursors are lowercase hex strings that clients pass back unchanged.
"""

from spacecraft_telemetry.core.pagination.cursor import (
    SCOPE_DIGEST_SIZE,
    CursorCodec,
    cursor_scope,
)
from spacecraft_telemetry.core.pagination.schemas import PagedResult

__all__ = [
    "SCOPE_DIGEST_SIZE",
    # Cursor utilities
    "CursorCodec",
    # REST-style schema
    "PagedResult",
    "cursor_scope",
]
