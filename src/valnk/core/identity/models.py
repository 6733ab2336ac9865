"""Entity identity models.

Usage:
    sid = SubmissionId(new_entity_id())
    cid = CommentId(parse_entity_id("3f0c2b9e-..."))
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, NewType

from valnk.core.errors import InvalidAttributeError

EntityId = NewType("EntityId", str)
"""Opaque, non-empty identifier. Immutable once assigned."""

# Same representation, never comparable across kinds.
SubmissionId = NewType("SubmissionId", EntityId)
CommentId = NewType("CommentId", EntityId)
ReplyId = NewType("ReplyId", EntityId)


class EntityType(Enum):
    """Kind discriminant stored on every item as `entity_type`."""

    SUBMISSION = "submission"
    COMMENT = "comment"
    REPLY = "reply"


def new_entity_id() -> EntityId:
    """Generate a globally unique identifier (random UUID4)."""
    return EntityId(str(uuid.uuid4()))


def parse_entity_id(value: Any, attribute: str = "id") -> EntityId:
    """Validate a caller-supplied identifier.

    Args:
        value: Candidate identifier.
        attribute: Field name reported in the error.

    Returns:
        The identifier as an EntityId.

    Raises:
        InvalidAttributeError: If value is not a non-empty string.
    """
    if not isinstance(value, str):
        raise InvalidAttributeError(attribute, f"expected a string, got {type(value).__name__}")
    if not value:
        raise InvalidAttributeError(attribute, "cannot be empty")
    return EntityId(value)
