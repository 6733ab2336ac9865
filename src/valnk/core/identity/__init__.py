"""Entity identity functionality: opaque IDs and kind discriminants."""

from valnk.core.identity.models import (
    CommentId,
    EntityId,
    EntityType,
    ReplyId,
    SubmissionId,
    new_entity_id,
    parse_entity_id,
)

__all__ = [
    "EntityId",
    "SubmissionId",
    "CommentId",
    "ReplyId",
    "EntityType",
    "new_entity_id",
    "parse_entity_id",
]
