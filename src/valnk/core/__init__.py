"""Core functionalities: pure, stateless key and cursor primitives.

Architecture Note:
    core/ contains pure functions and immutable models with no I/O.
    Everything here is reentrant and safe to call concurrently.
    For the store-facing layers, see storage/, query/ and api/.
"""

from valnk.core.cursor import decode_cursor, encode_cursor
from valnk.core.errors import (
    BadRequestError,
    BuildError,
    InvalidAttributeError,
    InvalidInputDataError,
    InvalidOutputDataError,
    MalformedCursorError,
    ServerError,
    UnknownError,
    ValnkError,
)
from valnk.core.identity import (
    CommentId,
    EntityId,
    EntityType,
    ReplyId,
    SubmissionId,
    new_entity_id,
    parse_entity_id,
)
from valnk.core.keys import (
    IndexKey,
    KeyLayout,
    PrimaryKey,
    derive_primary_key,
    derive_secondary_key,
    sort_prefix,
)

__all__ = [
    # Errors
    "ValnkError",
    "BadRequestError",
    "InvalidInputDataError",
    "InvalidAttributeError",
    "MalformedCursorError",
    "BuildError",
    "InvalidOutputDataError",
    "ServerError",
    "UnknownError",
    # Identity
    "EntityId",
    "SubmissionId",
    "CommentId",
    "ReplyId",
    "EntityType",
    "new_entity_id",
    "parse_entity_id",
    # Keys
    "PrimaryKey",
    "IndexKey",
    "KeyLayout",
    "derive_primary_key",
    "derive_secondary_key",
    "sort_prefix",
    # Cursor
    "encode_cursor",
    "decode_cursor",
]
