"""valnk: single-table index keys and cursor pagination for a content store.

Usage:
    from valnk import ContentClient, LocalStore, SubmissionBuilder

    client = ContentClient(LocalStore())
    for score in (5, 10, 1):
        client.create_item(
            SubmissionBuilder(
                author_id="py0x", topic="news", ranking_score=score,
                title="t", url="", text="",
            ).build()
        )

    page = client.list_submissions_by_topic("news", limit=2)   # scores 1, 5
    page = client.list_submissions_by_topic("news", limit=2, start_cursor=page.next_cursor)
"""

import logging

__version__ = "0.1.0"

# Client
from valnk.api import ContentClient

# Configuration
from valnk.config import PaginationSettings

# Core primitives
from valnk.core import (
    BadRequestError,
    BuildError,
    CommentId,
    EntityId,
    EntityType,
    IndexKey,
    InvalidAttributeError,
    InvalidInputDataError,
    InvalidOutputDataError,
    MalformedCursorError,
    PrimaryKey,
    ReplyId,
    ServerError,
    SubmissionId,
    UnknownError,
    ValnkError,
    decode_cursor,
    derive_primary_key,
    derive_secondary_key,
    encode_cursor,
    new_entity_id,
    sort_prefix,
)

# Entities
from valnk.entities import (
    Comment,
    CommentBuilder,
    Reply,
    ReplyBuilder,
    Submission,
    SubmissionBuilder,
    from_item,
    to_item,
)

# Query
from valnk.query import (
    COMMENTS_BY_AUTHOR,
    COMMENTS_BY_SUBMISSION,
    REPLIES_BY_AUTHOR,
    REPLIES_BY_SUBMISSION,
    SUBMISSIONS_BY_AUTHOR,
    SUBMISSIONS_BY_TOPIC,
    IndexQueryPlanner,
    IndexSpec,
    Page,
)

# Storage
from valnk.storage import DocumentStore, LocalStore, ScanRequest, ScanResult, TransportError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Identity
    "EntityId",
    "SubmissionId",
    "CommentId",
    "ReplyId",
    "EntityType",
    "new_entity_id",
    # Keys
    "PrimaryKey",
    "IndexKey",
    "derive_primary_key",
    "derive_secondary_key",
    "sort_prefix",
    # Cursor
    "encode_cursor",
    "decode_cursor",
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
    # Entities
    "Submission",
    "Comment",
    "Reply",
    "SubmissionBuilder",
    "CommentBuilder",
    "ReplyBuilder",
    "to_item",
    "from_item",
    # Query
    "IndexSpec",
    "Page",
    "IndexQueryPlanner",
    "SUBMISSIONS_BY_TOPIC",
    "SUBMISSIONS_BY_AUTHOR",
    "COMMENTS_BY_SUBMISSION",
    "COMMENTS_BY_AUTHOR",
    "REPLIES_BY_SUBMISSION",
    "REPLIES_BY_AUTHOR",
    # Storage
    "DocumentStore",
    "LocalStore",
    "ScanRequest",
    "ScanResult",
    "TransportError",
    # Client
    "ContentClient",
    # Configuration
    "PaginationSettings",
]
