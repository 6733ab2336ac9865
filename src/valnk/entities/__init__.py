"""Entity records, builders and item serialization."""

from valnk.entities.builders import CommentBuilder, ReplyBuilder, SubmissionBuilder
from valnk.entities.models import (
    Comment,
    RankingScore,
    Record,
    RecordKeys,
    Reply,
    Submission,
    comment_keys,
    reply_keys,
    submission_keys,
)
from valnk.entities.serialization import from_item, key_position, to_item

__all__ = [
    # Models
    "Submission",
    "Comment",
    "Reply",
    "Record",
    "RecordKeys",
    "RankingScore",
    "submission_keys",
    "comment_keys",
    "reply_keys",
    # Builders
    "SubmissionBuilder",
    "CommentBuilder",
    "ReplyBuilder",
    # Serialization
    "to_item",
    "from_item",
    "key_position",
]
