"""Cursor codec for stateless, resumable pagination."""

from valnk.core.cursor.codec import (
    CURSOR_VERSION,
    DEFAULT_MAX_CURSOR_LENGTH,
    CursorValue,
    Position,
    decode_cursor,
    encode_cursor,
)

__all__ = [
    "CURSOR_VERSION",
    "DEFAULT_MAX_CURSOR_LENGTH",
    "CursorValue",
    "Position",
    "encode_cursor",
    "decode_cursor",
]
