"""Entity records sharing one physical table.

Records are immutable. Their keys are derived once by a builder and stored
alongside the business attributes; `fresh_keys()` re-derives them so readers
can verify the two never drifted apart.

Usage:
    submission = SubmissionBuilder(author_id="py0x", topic="news", ...).build()
    assert submission.keys == submission.fresh_keys()
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from valnk.core.identity import CommentId, EntityType, ReplyId, SubmissionId
from valnk.core.keys import (
    AUTHOR_TAG,
    COMMENT_TAG,
    REPLY_TAG,
    SUBMISSION_TAG,
    TOPIC_TAG,
    IndexKey,
    PrimaryKey,
    derive_primary_key,
    derive_secondary_key,
    timestamp_sort_number,
)

RankingScore = int


@dataclass(frozen=True, slots=True)
class RecordKeys:
    """Full key tuple of one record.

    Attributes:
        primary: Table key.
        group: GSI1 key (by topic for submissions, by submission otherwise).
        author: GSI2 key (by author, ordered by creation time).
    """

    primary: PrimaryKey
    group: IndexKey
    author: IndexKey


def submission_keys(
    id: str,
    topic: str,
    ranking_score: RankingScore,
    author_id: str,
    created_at: datetime,
) -> RecordKeys:
    """Keys of a submission: by topic and ranking score, by author and creation time."""
    return RecordKeys(
        primary=derive_primary_key(SUBMISSION_TAG, id),
        group=derive_secondary_key(SUBMISSION_TAG, TOPIC_TAG, topic, ranking_score),
        author=derive_secondary_key(
            SUBMISSION_TAG, AUTHOR_TAG, author_id, timestamp_sort_number(created_at)
        ),
    )


def comment_keys(
    id: str,
    submission_id: str,
    ranking_score: RankingScore,
    author_id: str,
    created_at: datetime,
) -> RecordKeys:
    """Keys of a comment: by submission and ranking score, by author and creation time."""
    return RecordKeys(
        primary=derive_primary_key(COMMENT_TAG, id),
        group=derive_secondary_key(COMMENT_TAG, SUBMISSION_TAG, submission_id, ranking_score),
        author=derive_secondary_key(
            COMMENT_TAG, AUTHOR_TAG, author_id, timestamp_sort_number(created_at)
        ),
    )


def reply_keys(
    id: str,
    submission_id: str,
    comment_id: str,
    author_id: str,
    created_at: datetime,
) -> RecordKeys:
    """Keys of a reply: by submission and comment in creation order, by author."""
    created_ts = timestamp_sort_number(created_at)
    return RecordKeys(
        primary=derive_primary_key(REPLY_TAG, id),
        group=derive_secondary_key(
            REPLY_TAG, SUBMISSION_TAG, submission_id, created_ts, parent=comment_id
        ),
        author=derive_secondary_key(REPLY_TAG, AUTHOR_TAG, author_id, created_ts),
    )


@dataclass(frozen=True, slots=True)
class Submission:
    """A link or text post under a topic."""

    entity_type: ClassVar[EntityType] = EntityType.SUBMISSION

    id: SubmissionId
    author_id: str
    topic: str
    ranking_score: RankingScore
    title: str
    url: str
    text: str
    n_votes: int
    n_comments: int
    created_at: datetime
    updated_at: datetime
    keys: RecordKeys

    def fresh_keys(self) -> RecordKeys:
        return submission_keys(
            self.id, self.topic, self.ranking_score, self.author_id, self.created_at
        )


@dataclass(frozen=True, slots=True)
class Comment:
    """A top-level comment on a submission."""

    entity_type: ClassVar[EntityType] = EntityType.COMMENT

    id: CommentId
    submission_id: SubmissionId
    author_id: str
    ranking_score: RankingScore
    text: str
    n_likes: int
    n_replies: int
    created_at: datetime
    updated_at: datetime
    keys: RecordKeys

    def fresh_keys(self) -> RecordKeys:
        return comment_keys(
            self.id, self.submission_id, self.ranking_score, self.author_id, self.created_at
        )


@dataclass(frozen=True, slots=True)
class Reply:
    """A reply to a comment, indexed under the comment's submission."""

    entity_type: ClassVar[EntityType] = EntityType.REPLY

    id: ReplyId
    submission_id: SubmissionId
    comment_id: CommentId
    author_id: str
    text: str
    n_likes: int
    created_at: datetime
    updated_at: datetime
    keys: RecordKeys

    def fresh_keys(self) -> RecordKeys:
        return reply_keys(
            self.id, self.submission_id, self.comment_id, self.author_id, self.created_at
        )


Record = Submission | Comment | Reply
