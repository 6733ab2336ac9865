"""Index selectors and page results.

Usage:
    page = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2)
    for submission in page.items:
        ...
    if page.next_cursor:
        page = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=page.next_cursor)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from valnk.core.keys import (
    AUTHOR_TAG,
    COMMENT_TAG,
    GSI1_LAYOUT,
    GSI2_LAYOUT,
    PRIMARY_LAYOUT,
    REPLY_TAG,
    SUBMISSION_TAG,
    TOPIC_TAG,
    KeyLayout,
    partition_value,
    sort_prefix,
)
from valnk.entities import Comment, Record, Reply, Submission

R = TypeVar("R", bound=Record)
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class IndexSpec(Generic[R]):
    """Which records a listing returns and how they are grouped and ordered.

    Attributes:
        name: Human-readable selector name, used in logs.
        layout: Physical index and its key attribute names.
        grouping_tag: Tag leading the index partition.
        kind_tag: Tag leading the sort key of the listed kind.
        record_type: Record class items deserialize into.
    """

    name: str
    layout: KeyLayout
    grouping_tag: str
    kind_tag: str
    record_type: type[R]

    def partition(self, grouping_value: Any) -> str:
        """Partition value scanned for a grouping value."""
        return partition_value(self.grouping_tag, grouping_value)

    def prefix(self, parent: Any = None) -> str:
        """Sort-key prefix restricting the scan to this kind (and parent)."""
        return sort_prefix(self.kind_tag, parent)

    @property
    def cursor_fields(self) -> tuple[str, ...]:
        """Attributes a resume position must carry for this index."""
        return PRIMARY_LAYOUT.attributes + self.layout.attributes


@dataclass(slots=True)
class Page(Generic[T]):
    """One page of a listing.

    Attributes:
        items: Typed records in scan order.
        next_cursor: Opaque resume token, None at end of results.
    """

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


SUBMISSIONS_BY_TOPIC: IndexSpec[Submission] = IndexSpec(
    name="submissions_by_topic",
    layout=GSI1_LAYOUT,
    grouping_tag=TOPIC_TAG,
    kind_tag=SUBMISSION_TAG,
    record_type=Submission,
)
"""Submissions under a topic, ordered by ranking score."""

SUBMISSIONS_BY_AUTHOR: IndexSpec[Submission] = IndexSpec(
    name="submissions_by_author",
    layout=GSI2_LAYOUT,
    grouping_tag=AUTHOR_TAG,
    kind_tag=SUBMISSION_TAG,
    record_type=Submission,
)
"""Submissions by an author, ordered by creation time."""

COMMENTS_BY_SUBMISSION: IndexSpec[Comment] = IndexSpec(
    name="comments_by_submission",
    layout=GSI1_LAYOUT,
    grouping_tag=SUBMISSION_TAG,
    kind_tag=COMMENT_TAG,
    record_type=Comment,
)
"""Comments on a submission, ordered by ranking score."""

COMMENTS_BY_AUTHOR: IndexSpec[Comment] = IndexSpec(
    name="comments_by_author",
    layout=GSI2_LAYOUT,
    grouping_tag=AUTHOR_TAG,
    kind_tag=COMMENT_TAG,
    record_type=Comment,
)
"""Comments by an author, ordered by creation time."""

REPLIES_BY_SUBMISSION: IndexSpec[Reply] = IndexSpec(
    name="replies_by_submission",
    layout=GSI1_LAYOUT,
    grouping_tag=SUBMISSION_TAG,
    kind_tag=REPLY_TAG,
    record_type=Reply,
)
"""Replies under a submission, grouped by comment then ordered by creation
time. Pass `parent=<comment id>` to list the replies of a single comment."""

REPLIES_BY_AUTHOR: IndexSpec[Reply] = IndexSpec(
    name="replies_by_author",
    layout=GSI2_LAYOUT,
    grouping_tag=AUTHOR_TAG,
    kind_tag=REPLY_TAG,
    record_type=Reply,
)
"""Replies by an author, ordered by creation time."""
