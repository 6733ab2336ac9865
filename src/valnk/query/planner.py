"""Index query planner: list requests to range scans, raw items to typed pages.

The planner is stateless between calls. A listing is resumed purely from the
cursor the previous page returned, so concurrent listings need no locking and
retrying a page with the same cursor is always safe.

Usage:
    planner = IndexQueryPlanner(LocalStore())
    page = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2)
    rest = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=page.next_cursor)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from valnk.config import PaginationSettings
from valnk.core.cursor import decode_cursor, encode_cursor
from valnk.core.errors import (
    BadRequestError,
    InvalidOutputDataError,
    MalformedCursorError,
    ServerError,
    UnknownError,
    ValnkError,
)
from valnk.entities import Record, from_item, key_position
from valnk.query.models import IndexSpec, Page
from valnk.storage.protocol import DocumentStore, ScanRequest, ScanResult, TransportError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


@contextmanager
def _store_errors(index: IndexSpec[Any]) -> Iterator[None]:
    """Translate backend failures, including unreadable scan results, into valnk errors."""
    try:
        yield
    except TransportError as e:
        logger.warning("Scan of %s failed upstream: %s", index.name, e)
        raise ServerError(str(e)) from e
    except ValnkError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure while scanning %s", index.name)
        raise UnknownError(f"{type(e).__name__}: {e}") from e


class IndexQueryPlanner:
    """Plans paginated scans over the secondary indexes of the shared table.

    Args:
        store: Backend executing the scans.
        settings: Pagination settings, loaded from the environment if omitted.
    """

    def __init__(self, store: DocumentStore, settings: PaginationSettings | None = None):
        self._store = store
        self._settings = settings if settings is not None else PaginationSettings()

    @property
    def settings(self) -> PaginationSettings:
        return self._settings

    def _page_size(self, limit: Any) -> int:
        if limit is None:
            return self._settings.default_page_size
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise BadRequestError(f"limit must be an integer, got {type(limit).__name__}")
        if limit <= 0:
            raise BadRequestError(f"limit must be positive, got {limit}")
        return limit

    def plan(
        self,
        index: IndexSpec[Any],
        grouping_value: Any,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
        *,
        parent: Any = None,
    ) -> tuple[ScanRequest, int]:
        """Build the scan for one page without executing it.

        One item beyond the page size is requested so the planner can tell
        whether more results exist.

        Returns:
            The scan request and the page size it serves.

        Raises:
            BadRequestError: If limit or reverse are invalid.
            InvalidAttributeError: If the grouping value or parent is invalid.
            MalformedCursorError: If start_cursor does not decode into a
                position inside this listing.
        """
        page_size = self._page_size(limit)
        if not isinstance(reverse, bool):
            raise BadRequestError(f"reverse must be a boolean, got {type(reverse).__name__}")

        partition = index.partition(grouping_value)
        prefix = index.prefix(parent)

        start_key = None
        if start_cursor is not None:
            start_key = decode_cursor(
                start_cursor,
                required=index.cursor_fields,
                max_length=self._settings.max_cursor_length,
            )
            if start_key[index.layout.partition] != partition:
                raise MalformedCursorError(f"cursor does not belong to {index.name} of {partition}")
            start_sort = start_key[index.layout.sort]
            if not isinstance(start_sort, str) or not start_sort.startswith(prefix):
                raise MalformedCursorError(f"cursor position is outside the `{prefix}` range")

        request = ScanRequest(
            index_name=index.layout.index_name or "",
            partition_attribute=index.layout.partition,
            partition_value=partition,
            sort_attribute=index.layout.sort,
            sort_prefix=prefix,
            limit=page_size + 1,
            reverse=reverse,
            exclusive_start_key=start_key,
        )
        logger.debug(
            "Planned scan of %s: partition=%s prefix=%s limit=%d reverse=%s resumed=%s",
            index.name,
            partition,
            prefix,
            page_size,
            reverse,
            start_key is not None,
        )
        return request, page_size

    def _interpret(self, index: IndexSpec[R], result: ScanResult, page_size: int) -> Page[R]:
        raw = result.items
        if len(raw) > page_size:
            raw = raw[:page_size]
            has_more = True
        else:
            has_more = result.last_evaluated_key is not None

        try:
            items = [from_item(index.record_type, item) for item in raw]
        except InvalidOutputDataError as e:
            logger.warning("Item from %s failed to deserialize: %s", index.name, e)
            raise

        next_cursor = None
        if has_more:
            if raw:
                position = key_position(raw[-1], index.layout)
            else:
                position = dict(result.last_evaluated_key or {})
            next_cursor = encode_cursor(position)
        return Page(items=items, next_cursor=next_cursor)

    def list(
        self,
        index: IndexSpec[R],
        grouping_value: Any,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
        *,
        parent: Any = None,
    ) -> Page[R]:
        """List one page of records from an index.

        Args:
            index: Index selector, e.g. SUBMISSIONS_BY_TOPIC.
            grouping_value: Topic, parent id or author id to scan.
            limit: Page size, defaults to the configured page size (30).
            reverse: Descending sort order when True.
            start_cursor: Token from a previous page; resumes after it.
            parent: Narrows the scan to one parent, e.g. a comment id for
                REPLIES_BY_SUBMISSION.

        Returns:
            Page with at most `limit` items and a next cursor only when more
            results exist.

        Raises:
            BadRequestError: Invalid pagination parameters.
            InvalidInputDataError: Malformed cursor or grouping value.
            InvalidOutputDataError: A stored item does not match its record type.
            ServerError: The store failed; the message is preserved.
            UnknownError: Any other failure.
        """
        request, page_size = self.plan(
            index, grouping_value, limit, reverse, start_cursor, parent=parent
        )
        with _store_errors(index):
            result = self._store.query(request)
            return self._interpret(index, result, page_size)

    async def list_async(
        self,
        index: IndexSpec[R],
        grouping_value: Any,
        limit: int | None = None,
        reverse: bool = False,
        start_cursor: str | None = None,
        *,
        parent: Any = None,
    ) -> Page[R]:
        """List one page of records from an index (async variant)."""
        request, page_size = self.plan(
            index, grouping_value, limit, reverse, start_cursor, parent=parent
        )
        with _store_errors(index):
            result = await self._store.query_async(request)
            return self._interpret(index, result, page_size)
