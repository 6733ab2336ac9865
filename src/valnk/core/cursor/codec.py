"""Cursor codec: raw index positions to opaque, URL-safe tokens and back.

A token is the URL-safe base64 (unpadded) form of a compact JSON document:

    {"k":{"GSI1_PK":"TOPIC#news","GSI1_SK":"SUBMS#0000000005","PK":"SUBMS#...","SK":"A"},"v":1}

Keys are sorted, so equal positions always produce equal tokens.

Usage:
    token = encode_cursor({"PK": "SUBMS#a", "SK": "A"})
    position = decode_cursor(token, required=("PK", "SK"))
"""

from __future__ import annotations

import base64
import binascii
import json
import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from valnk.core.errors import InvalidInputDataError, MalformedCursorError

CURSOR_VERSION = 1
DEFAULT_MAX_CURSOR_LENGTH = 4096

CursorValue = str | int | float | bool
Position = dict[str, CursorValue]

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
# Keeps integers below the interpreter's int/str conversion digit limit.
_MAX_INT_BITS = 14_000


def _is_representable(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value.bit_length() <= _MAX_INT_BITS
    return isinstance(value, str | bool)


def encode_cursor(position: Mapping[str, CursorValue]) -> str:
    """Serialize a raw index position into an opaque token.

    Args:
        position: Key attributes of the last item examined by a scan.

    Returns:
        Printable ASCII token, safe in URL query parameters.

    Raises:
        InvalidInputDataError: If the position is empty or holds a field
            name or value that cannot round-trip exactly.
    """
    if not position:
        raise InvalidInputDataError("cannot encode an empty cursor position")
    for name, value in position.items():
        if not isinstance(name, str):
            raise InvalidInputDataError(f"cursor field names must be strings, got {name!r}")
        if not _is_representable(value):
            raise InvalidInputDataError(
                f"cursor field `{name}` has unsupported value type {type(value).__name__}"
            )

    payload = json.dumps(
        {"v": CURSOR_VERSION, "k": dict(position)},
        sort_keys=True,
        separators=(",", ":"),
        allow_nan=False,
    )
    return base64.urlsafe_b64encode(payload.encode("ascii")).decode("ascii").rstrip("=")


def decode_cursor(
    token: str,
    required: Iterable[str] = (),
    max_length: int = DEFAULT_MAX_CURSOR_LENGTH,
) -> Position:
    """Parse a token produced by `encode_cursor`.

    Args:
        token: Opaque cursor token.
        required: Field names the position must contain.
        max_length: Longest token accepted.

    Returns:
        The raw position, equal to the mapping originally encoded.

    Raises:
        MalformedCursorError: If the token is syntactically invalid or
            semantically incomplete. Never returns a partial position.
    """
    if not isinstance(token, str) or not token:
        raise MalformedCursorError("token is empty")
    if len(token) > max_length:
        raise MalformedCursorError(f"token longer than {max_length} characters")
    if not _TOKEN_PATTERN.fullmatch(token):
        raise MalformedCursorError("token contains characters outside the URL-safe alphabet")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise MalformedCursorError("token is not valid base64") from e

    try:
        document = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedCursorError("payload is not UTF-8") from e
    except json.JSONDecodeError as e:
        raise MalformedCursorError("payload is not valid JSON") from e
    except (RecursionError, ValueError) as e:
        raise MalformedCursorError("payload cannot be parsed") from e

    if not isinstance(document, dict) or set(document) != {"v", "k"}:
        raise MalformedCursorError("unexpected payload shape")
    if document["v"] != CURSOR_VERSION or isinstance(document["v"], bool):
        raise MalformedCursorError(f"unsupported cursor version {document['v']!r}")

    position = document["k"]
    if not isinstance(position, dict) or not position:
        raise MalformedCursorError("position is missing or empty")
    for name, value in position.items():
        if not _is_representable(value):
            raise MalformedCursorError(f"field `{name}` holds an unsupported value")

    missing = [name for name in required if name not in position]
    if missing:
        raise MalformedCursorError(f"missing key fields: {', '.join(missing)}")

    return position
