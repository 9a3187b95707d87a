"""Cursor encoding and decoding for pagination.

Cursors are opaque strings wrapping the store's native paging state (an
arbitrary byte sequence). The wire format is lowercase hexadecimal, which is
safe in URLs and query strings without further escaping.

A cursor may be bound to a scope (telemetry kind + partition key). A scoped
cursor carries a short digest of its scope in front of the paging state, so
presenting it against another kind or partition is rejected locally instead
of being sent to the store.

Example:
    state = b"\\x00\\x10abc"
    cursor = CursorCodec.encode(state, scope="temperature:gemini3:abb7c000-...")
    CursorCodec.decode(cursor, scope="temperature:gemini3:abb7c000-...") == state
"""

from __future__ import annotations

import hashlib
import re

from spacecraft_telemetry.core.exceptions import InvalidCursor

SCOPE_DIGEST_SIZE = 4
_HEX_PREFIX = "0x"
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


class CursorCodec:
    """Encode and decode pagination cursors.

    ``encode`` is total over bytes. ``decode`` raises InvalidCursor for any
    input that ``encode`` could not have produced for the given scope.
    """

    @staticmethod
    def encode(paging_state: bytes, scope: str | None = None) -> str:
        """Encode a native paging state to an opaque string.

        Args:
            paging_state: Store continuation token
            scope: Optional scope the cursor is only valid for

        Returns:
            Lowercase hexadecimal string
        """
        if scope is not None:
            paging_state = CursorCodec._scope_digest(scope) + paging_state
        return paging_state.hex()

    @staticmethod
    def decode(cursor: str, scope: str | None = None) -> bytes:
        """Decode a cursor string back to the native paging state.

        A leading ``0x`` is tolerated.

        Args:
            cursor: Hex string produced by encode()
            scope: Scope the cursor must have been encoded for

        Returns:
            The paging state bytes

        Raises:
            InvalidCursor: If the cursor is not valid hex, is truncated, or
                belongs to a different scope
        """
        if not isinstance(cursor, str):
            raise InvalidCursor("Page state must be a string")

        text = cursor.strip()
        if text[:2].lower() == _HEX_PREFIX:
            text = text[2:]

        if len(text) % 2:
            raise InvalidCursor(
                "Page state is not valid: odd number of hex digits",
                extra={"page_state_length": len(text)},
            )
        if not _HEX_DIGITS.fullmatch(text):
            raise InvalidCursor("Page state is not valid: expected hexadecimal characters")
        raw = bytes.fromhex(text)

        if scope is None:
            return raw

        if len(raw) < SCOPE_DIGEST_SIZE:
            raise InvalidCursor("Page state is not valid: truncated")

        digest, paging_state = raw[:SCOPE_DIGEST_SIZE], raw[SCOPE_DIGEST_SIZE:]
        if digest != CursorCodec._scope_digest(scope):
            raise InvalidCursor(
                "Page state was issued for a different telemetry kind or journey",
            )
        return paging_state

    @staticmethod
    def _scope_digest(scope: str) -> bytes:
        return hashlib.blake2s(scope.encode("utf-8"), digest_size=SCOPE_DIGEST_SIZE).digest()


def cursor_scope(kind: str, spacecraft_name: str, journey_id: object) -> str:
    """Build the scope string binding a cursor to one kind and partition."""
    return f"{kind}:{spacecraft_name}:{journey_id}"


__all__ = ["SCOPE_DIGEST_SIZE", "CursorCodec", "cursor_scope"]
