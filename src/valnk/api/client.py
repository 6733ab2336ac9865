"""Content client: create records and list them through their indexes.

Usage:
    client = ContentClient(LocalStore())
    submission = SubmissionBuilder(
        author_id="py0x", topic="news", ranking_score=10,
        title="create_item example", url="", text="hello",
    ).build()
    client.create_item(submission)

    page = client.list_submissions_by_topic("news", limit=1)
    page = client.list_submissions_by_topic("news", limit=1, start_cursor=page.next_cursor)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from valnk.config import PaginationSettings
from valnk.core.errors import InvalidInputDataError, ServerError
from valnk.entities import Comment, Record, Reply, Submission, to_item
from valnk.query import (
    COMMENTS_BY_AUTHOR,
    COMMENTS_BY_SUBMISSION,
    REPLIES_BY_AUTHOR,
    REPLIES_BY_SUBMISSION,
    SUBMISSIONS_BY_AUTHOR,
    SUBMISSIONS_BY_TOPIC,
    IndexQueryPlanner,
    Page,
)
from valnk.storage.protocol import DocumentStore, Item, TransportError

logger = logging.getLogger(__name__)


@contextmanager
def _write_errors(record: Record) -> Iterator[None]:
    try:
        yield
    except TransportError as e:
        logger.warning("Failed to store %s `%s`: %s", record.entity_type.value, record.id, e)
        raise ServerError(str(e)) from e


class ContentClient:
    """Entry point for storing and paginating submissions, comments and replies.

    Args:
        store: Backend holding the shared table.
        settings: Pagination settings, loaded from the environment if omitted.
    """

    def __init__(self, store: DocumentStore, settings: PaginationSettings | None = None):
        self._store = store
        self._planner = IndexQueryPlanner(store, settings)

    @property
    def planner(self) -> IndexQueryPlanner:
        return self._planner

    def _item(self, record: Record) -> Item:
        if not isinstance(record, Submission | Comment | Reply):
            raise InvalidInputDataError(f"cannot store {type(record).__name__}")
        return to_item(record)

    def create_item(self, record: Record) -> None:
        """Store a fully built record.

        Raises:
            InvalidInputDataError: If record is not a Submission, Comment or Reply.
            ServerError: If the store rejects the write.
        """
        item = self._item(record)
        with _write_errors(record):
            self._store.put_item(item)
        logger.debug("Created %s `%s`", record.entity_type.value, record.id)

    async def create_item_async(self, record: Record) -> None:
        """Store a fully built record (async variant)."""
        item = self._item(record)
        with _write_errors(record):
            await self._store.put_item_async(item)
        logger.debug("Created %s `%s`", record.entity_type.value, record.id)

    def list_submissions_by_topic(
        self,
        topic: str,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Submission]:
        """Submissions under a topic, ordered by ranking score."""
        return self._planner.list(SUBMISSIONS_BY_TOPIC, topic, limit, reverse, start_cursor)

    def list_submissions_by_author(
        self,
        author_id: str,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Submission]:
        """Submissions by an author, oldest first unless reversed."""
        return self._planner.list(SUBMISSIONS_BY_AUTHOR, author_id, limit, reverse, start_cursor)

    def list_comments_by_submission(
        self,
        submission_id: str,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Comment]:
        """Comments on a submission, ordered by ranking score."""
        return self._planner.list(
            COMMENTS_BY_SUBMISSION, submission_id, limit, reverse, start_cursor
        )

    def list_comments_by_author(
        self,
        author_id: str,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Comment]:
        return self._planner.list(COMMENTS_BY_AUTHOR, author_id, limit, reverse, start_cursor)

    def list_replies_by_submission(
        self,
        submission_id: str,
        comment_id: str | None = None,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Reply]:
        """Replies under a submission, or under one of its comments.

        Without comment_id, replies are grouped by comment and each group is
        ordered by creation time.
        """
        return self._planner.list(
            REPLIES_BY_SUBMISSION,
            submission_id,
            limit,
            reverse,
            start_cursor,
            parent=comment_id,
        )

    def list_replies_by_author(
        self,
        author_id: str,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
    ) -> Page[Reply]:
        return self._planner.list(REPLIES_BY_AUTHOR, author_id, limit, reverse, start_cursor)
