"""Step-by-step construction of entity records.

A builder accumulates optional fields and validates them all at once in
`build()`: every missing required field is reported together, then ids,
counters and timestamps are defaulted and the keys are derived.

Usage:
    builder = SubmissionBuilder().with_(author_id="py0x", topic="news")
    builder = builder.with_(ranking_score=10, title="t", url="", text="hello")
    submission = builder.build()
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import UTC, datetime
from functools import cache
from typing import Any, ClassVar, Self, get_type_hints

from pydantic import TypeAdapter, ValidationError

from valnk.core.errors import BuildError, InvalidAttributeError
from valnk.core.identity import (
    CommentId,
    EntityId,
    ReplyId,
    SubmissionId,
    new_entity_id,
    parse_entity_id,
)
from valnk.entities.models import (
    Comment,
    RankingScore,
    Record,
    Reply,
    Submission,
    comment_keys,
    reply_keys,
    submission_keys,
)


def _normalize_timestamp(value: Any, attribute: str) -> datetime:
    if not isinstance(value, datetime):
        raise InvalidAttributeError(attribute, f"expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidAttributeError(attribute, "datetime must be timezone-aware")
    return value.astimezone(UTC)


@cache
def _field_adapters(record_type: type[Record]) -> dict[str, TypeAdapter[Any]]:
    hints = get_type_hints(record_type)
    return {f.name: TypeAdapter(hints[f.name]) for f in fields(record_type) if f.name != "keys"}


def _check_field_types(record_type: type[Record], values: dict[str, Any]) -> None:
    """Reject values the stored item could not be validated back from."""
    for name, adapter in _field_adapters(record_type).items():
        try:
            adapter.validate_python(values[name], strict=True)
        except ValidationError as e:
            expected = e.errors()[0]["msg"]
            raise InvalidAttributeError(name, f"{expected}, got {type(values[name]).__name__}") from e


@dataclass(frozen=True)
class _RecordBuilder:
    """Shared finalization logic for all builders."""

    record_name: ClassVar[str]
    record_type: ClassVar[type[Record]]
    required: ClassVar[tuple[str, ...]]
    counters: ClassVar[tuple[str, ...]]

    def with_(self, **changes: Any) -> Self:
        """Return a copy with the given fields set.

        Raises:
            TypeError: If a name is not a field of this builder.
        """
        return replace(self, **changes)

    def _finalize(self) -> dict[str, Any]:
        """Validate completeness and apply defaults.

        Returns:
            Field values ready to be passed to the record constructor.

        Raises:
            BuildError: Listing every required field still unset.
            InvalidAttributeError: If a supplied id or timestamp is invalid, or
                a field holds a value of the wrong type.
        """
        values = {f.name: getattr(self, f.name) for f in fields(self)}

        missing = tuple(name for name in self.required if values[name] is None)
        if missing:
            raise BuildError(self.record_name, missing)

        entity_id: EntityId | None = values["id"]
        values["id"] = new_entity_id() if entity_id is None else parse_entity_id(entity_id)

        for name in self.counters:
            if values[name] is None:
                values[name] = 0

        now = datetime.now(UTC)
        for name in ("created_at", "updated_at"):
            value = values[name]
            values[name] = now if value is None else _normalize_timestamp(value, name)

        _check_field_types(self.record_type, values)
        return values


@dataclass(frozen=True)
class SubmissionBuilder(_RecordBuilder):
    """Builds a Submission. `n_votes`/`n_comments` default to 0."""

    record_name: ClassVar[str] = "submission"
    record_type: ClassVar[type[Record]] = Submission
    required: ClassVar[tuple[str, ...]] = (
        "author_id",
        "topic",
        "ranking_score",
        "title",
        "url",
        "text",
    )
    counters: ClassVar[tuple[str, ...]] = ("n_votes", "n_comments")

    id: SubmissionId | None = None
    author_id: str | None = None
    topic: str | None = None
    ranking_score: RankingScore | None = None
    title: str | None = None
    url: str | None = None
    text: str | None = None
    n_votes: int | None = None
    n_comments: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def build(self) -> Submission:
        values = self._finalize()
        keys = submission_keys(
            values["id"],
            values["topic"],
            values["ranking_score"],
            values["author_id"],
            values["created_at"],
        )
        return Submission(**values, keys=keys)


@dataclass(frozen=True)
class CommentBuilder(_RecordBuilder):
    """Builds a Comment. `n_likes`/`n_replies` default to 0."""

    record_name: ClassVar[str] = "comment"
    record_type: ClassVar[type[Record]] = Comment
    required: ClassVar[tuple[str, ...]] = ("submission_id", "author_id", "ranking_score", "text")
    counters: ClassVar[tuple[str, ...]] = ("n_likes", "n_replies")

    id: CommentId | None = None
    submission_id: SubmissionId | None = None
    author_id: str | None = None
    ranking_score: RankingScore | None = None
    text: str | None = None
    n_likes: int | None = None
    n_replies: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def build(self) -> Comment:
        values = self._finalize()
        keys = comment_keys(
            values["id"],
            values["submission_id"],
            values["ranking_score"],
            values["author_id"],
            values["created_at"],
        )
        return Comment(**values, keys=keys)


@dataclass(frozen=True)
class ReplyBuilder(_RecordBuilder):
    """Builds a Reply. `n_likes` defaults to 0."""

    record_name: ClassVar[str] = "reply"
    record_type: ClassVar[type[Record]] = Reply
    required: ClassVar[tuple[str, ...]] = ("submission_id", "comment_id", "author_id", "text")
    counters: ClassVar[tuple[str, ...]] = ("n_likes",)

    id: ReplyId | None = None
    submission_id: SubmissionId | None = None
    comment_id: CommentId | None = None
    author_id: str | None = None
    text: str | None = None
    n_likes: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def build(self) -> Reply:
        values = self._finalize()
        keys = reply_keys(
            values["id"],
            values["submission_id"],
            values["comment_id"],
            values["author_id"],
            values["created_at"],
        )
        return Reply(**values, keys=keys)
