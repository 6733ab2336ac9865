"""Tests for the index query planner.

Critical Invariants:
- A next cursor is returned only when more results exist
- Concatenated pages equal one unbounded scan (any page size, either direction)
- Reverse inverts the order of the same result set
- Invalid cursors are hard errors, never an empty page
"""

import base64
import logging
from datetime import UTC, datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from valnk import (
    COMMENTS_BY_SUBMISSION,
    REPLIES_BY_SUBMISSION,
    SUBMISSIONS_BY_AUTHOR,
    SUBMISSIONS_BY_TOPIC,
    BadRequestError,
    CommentBuilder,
    IndexQueryPlanner,
    InvalidAttributeError,
    InvalidInputDataError,
    InvalidOutputDataError,
    LocalStore,
    MalformedCursorError,
    PaginationSettings,
    ReplyBuilder,
    ServerError,
    SubmissionBuilder,
    TransportError,
    UnknownError,
    encode_cursor,
    to_item,
)
from valnk.storage import ScanResult

BASE_TIME = datetime(2022, 6, 1, tzinfo=UTC)


def _submission(score, topic="news", author="py0x", created_at=BASE_TIME, id=None):
    return SubmissionBuilder(
        id=id,
        author_id=author,
        topic=topic,
        ranking_score=score,
        title=f"score {score}",
        url="",
        text="",
        created_at=created_at,
    ).build()


def _put(store, *records):
    for record in records:
        store.put_item(to_item(record))


def _collect(planner, limit, reverse, grouping_value="news"):
    pages = []
    cursor = None
    while True:
        page = planner.list(
            SUBMISSIONS_BY_TOPIC, grouping_value, limit=limit, reverse=reverse, start_cursor=cursor
        )
        pages.append(page)
        cursor = page.next_cursor
        if cursor is None:
            return pages


class FailingStore(LocalStore):
    """Store whose scans raise a preset exception."""

    def __init__(self, error: Exception):
        super().__init__()
        self._error = error

    def query(self, request):
        raise self._error


class RawStore(LocalStore):
    """Store returning a preset scan result."""

    def __init__(self, result: ScanResult):
        super().__init__()
        self._result = result

    def query(self, request):
        return self._result


def test_news_scenario(store, planner):
    """Three submissions scored 5, 10, 1 paginate as [1, 5] then [10]."""
    _put(store, _submission(5), _submission(10), _submission(1))

    first = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, reverse=False)
    assert [s.ranking_score for s in first.items] == [1, 5]
    assert first.next_cursor is not None

    second = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=first.next_cursor)
    assert [s.ranking_score for s in second.items] == [10]
    assert second.next_cursor is None


def test_exact_fit_page_has_no_cursor(store, planner):
    """No cursor when the page holds exactly the remaining items."""
    _put(store, _submission(1), _submission(2))

    page = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2)

    assert len(page.items) == 2
    assert page.next_cursor is None
    assert not page.has_more


def test_empty_partition(planner):
    page = planner.list(SUBMISSIONS_BY_TOPIC, "nothing-here")

    assert page.items == []
    assert page.next_cursor is None


def test_other_kinds_and_partitions_excluded(store, planner):
    target = _submission(3)
    _put(store, target, _submission(4, topic="sports"))
    _put(
        store,
        CommentBuilder(submission_id=target.id, author_id="a", ranking_score=1, text="c").build(),
    )

    page = planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert [s.id for s in page.items] == [target.id]


def test_default_page_size_from_settings(store):
    _put(store, *[_submission(i) for i in range(5)])
    planner = IndexQueryPlanner(store, PaginationSettings(default_page_size=3))

    page = planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert len(page.items) == 3
    assert page.next_cursor is not None


def test_default_page_size_is_thirty(store, planner):
    _put(store, *[_submission(i) for i in range(31)])

    page = planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert len(page.items) == 30
    assert page.next_cursor is not None


@given(
    scores=st.lists(st.integers(min_value=0, max_value=50), max_size=25),
    limit=st.integers(min_value=1, max_value=7),
    reverse=st.booleans(),
)
@settings(max_examples=60, deadline=None)
def test_pagination_completeness(scores, limit, reverse):
    """CRITICAL: pages concatenated in order equal one unbounded scan.

    Why: duplicate or skipped items across pages are silent data loss.
    Duplicate scores exercise ties broken by primary key.
    """
    store = LocalStore()
    _put(store, *[_submission(score) for score in scores])
    planner = IndexQueryPlanner(store, PaginationSettings())

    pages = _collect(planner, limit, reverse)
    paged = [s.id for page in pages for s in page.items]
    unbounded = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=len(scores) + 1, reverse=reverse)

    assert paged == [s.id for s in unbounded.items]
    assert len(paged) == len(scores)
    assert all(len(page.items) == limit for page in pages[:-1])


@given(scores=st.lists(st.integers(min_value=0, max_value=9_999_999_999), max_size=20))
@settings(max_examples=40, deadline=None)
def test_reverse_inverts_order(scores):
    store = LocalStore()
    _put(store, *[_submission(score) for score in scores])
    planner = IndexQueryPlanner(store, PaginationSettings())
    size = len(scores) + 1

    forward = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=size, reverse=False)
    backward = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=size, reverse=True)

    assert [s.id for s in forward.items][::-1] == [s.id for s in backward.items]
    assert [s.ranking_score for s in forward.items] == sorted(scores)


def test_author_index_orders_by_creation_time(store, planner):
    newest = _submission(1, created_at=BASE_TIME + timedelta(days=2))
    oldest = _submission(2, created_at=BASE_TIME)
    middle = _submission(3, created_at=BASE_TIME + timedelta(days=1))
    _put(store, newest, oldest, middle)

    page = planner.list(SUBMISSIONS_BY_AUTHOR, "py0x")

    assert [s.id for s in page.items] == [oldest.id, middle.id, newest.id]


def test_parent_narrows_reply_listing(store, planner):
    replies = [
        ReplyBuilder(
            submission_id="s1",
            comment_id=comment_id,
            author_id="a",
            text=str(i),
            created_at=BASE_TIME + timedelta(minutes=i),
        ).build()
        for i, comment_id in enumerate(["c1", "c2", "c1"])
    ]
    _put(store, *replies)

    all_replies = planner.list(REPLIES_BY_SUBMISSION, "s1")
    c1_replies = planner.list(REPLIES_BY_SUBMISSION, "s1", parent="c1")

    assert [r.text for r in all_replies.items] == ["0", "2", "1"]
    assert [r.text for r in c1_replies.items] == ["0", "2"]


@pytest.mark.parametrize("limit", [0, -1, 1.5, "2", True])
def test_invalid_limit_is_bad_request(planner, limit):
    with pytest.raises(BadRequestError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=limit)


def test_invalid_reverse_is_bad_request(planner):
    with pytest.raises(BadRequestError, match="reverse"):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", reverse="yes")


def test_missing_grouping_value_is_invalid_input(planner):
    with pytest.raises(InvalidAttributeError):
        planner.list(SUBMISSIONS_BY_TOPIC, "")


def test_truncated_cursor_is_invalid_input(store, planner):
    """CRITICAL: a malformed cursor is a hard error, never an empty page."""
    _put(store, _submission(5), _submission(10), _submission(1))
    cursor = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2).next_cursor

    with pytest.raises(InvalidInputDataError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=cursor[:-4])


def test_empty_cursor_is_invalid_input(planner):
    with pytest.raises(MalformedCursorError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", start_cursor="")


def test_cursor_from_another_listing_rejected(store, planner):
    _put(store, _submission(1), _submission(2), _submission(3, topic="sports"))
    cursor = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=1).next_cursor

    with pytest.raises(MalformedCursorError, match="does not belong"):
        planner.list(SUBMISSIONS_BY_TOPIC, "sports", start_cursor=cursor)


def test_cursor_outside_parent_range_rejected(planner):
    cursor = encode_cursor(
        {"PK": "REPLY#r", "SK": "A", "GSI1_PK": "SUBMS#s1", "GSI1_SK": "REPLY#c2#0000000001"}
    )

    with pytest.raises(MalformedCursorError, match="outside"):
        planner.list(REPLIES_BY_SUBMISSION, "s1", parent="c1", start_cursor=cursor)


def test_cursor_missing_index_fields_rejected(planner):
    cursor = encode_cursor({"PK": "SUBMS#a", "SK": "A"})

    with pytest.raises(MalformedCursorError, match="missing key fields"):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", start_cursor=cursor)


def test_deeply_nested_cursor_is_invalid_input(planner):
    payload = '{"v":1,"k":' + "[" * 2500
    token = base64.urlsafe_b64encode(payload.encode()).decode("ascii").rstrip("=")

    with pytest.raises(InvalidInputDataError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", start_cursor=token)


def test_oversized_cursor_rejected(store):
    planner = IndexQueryPlanner(store, PaginationSettings(max_cursor_length=16))
    cursor = encode_cursor(
        {"PK": "SUBMS#a", "SK": "A", "GSI1_PK": "TOPIC#news", "GSI1_SK": "SUBMS#0000000001"}
    )

    with pytest.raises(MalformedCursorError, match="longer than"):
        planner.list(SUBMISSIONS_BY_TOPIC, "news", start_cursor=cursor)


def test_retry_with_same_cursor_is_safe(store, planner):
    _put(store, *[_submission(i) for i in range(5)])
    cursor = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2).next_cursor

    first = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=cursor)
    again = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=cursor)

    assert first == again


def test_transport_error_becomes_server_error(caplog):
    planner = IndexQueryPlanner(FailingStore(TransportError("ThrottlingException: slow down")))

    with caplog.at_level(logging.WARNING), pytest.raises(ServerError) as exc_info:
        planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert exc_info.value.message == "ThrottlingException: slow down"
    assert isinstance(exc_info.value.__cause__, TransportError)


def test_unexpected_error_becomes_unknown_and_is_logged(caplog):
    planner = IndexQueryPlanner(FailingStore(RuntimeError("boom")))

    with caplog.at_level(logging.ERROR), pytest.raises(UnknownError, match="RuntimeError: boom"):
        planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert any(record.exc_info for record in caplog.records)


def test_invalid_stored_item_is_invalid_output():
    item = to_item(_submission(1))
    item["ranking_score"] = "one"
    planner = IndexQueryPlanner(RawStore(ScanResult(items=[item])))

    with pytest.raises(InvalidOutputDataError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news")


def test_unreadable_scan_result_becomes_unknown(caplog):
    planner = IndexQueryPlanner(RawStore(ScanResult(items=["not-an-item"])))  # type: ignore[list-item]

    with caplog.at_level(logging.ERROR), pytest.raises(UnknownError):
        planner.list(SUBMISSIONS_BY_TOPIC, "news")

    assert any(record.exc_info for record in caplog.records)


def test_wrong_kind_in_index_is_invalid_output():
    comment = CommentBuilder(submission_id="s1", author_id="a", ranking_score=1, text="c").build()
    planner = IndexQueryPlanner(RawStore(ScanResult(items=[to_item(comment)])))

    with pytest.raises(InvalidOutputDataError, match="entity_type"):
        planner.list(SUBMISSIONS_BY_TOPIC, "news")


def test_store_cut_short_still_yields_cursor():
    """A backend stopping early with a last key still signals more results."""
    item = to_item(_submission(1))
    last_key = {name: item[name] for name in ("PK", "SK", "GSI1_PK", "GSI1_SK")}
    planner = IndexQueryPlanner(RawStore(ScanResult(items=[item], last_evaluated_key=last_key)))

    page = planner.list(SUBMISSIONS_BY_TOPIC, "news", limit=5)

    assert len(page.items) == 1
    assert page.next_cursor == encode_cursor(last_key)


def test_plan_requests_one_extra_item(planner):
    request, page_size = planner.plan(COMMENTS_BY_SUBMISSION, "s1", limit=4, reverse=True)

    assert page_size == 4
    assert request.limit == 5
    assert request.index_name == "GSI1"
    assert request.partition_value == "SUBMS#s1"
    assert request.sort_prefix == "COMMT#"
    assert request.reverse is True
    assert request.exclusive_start_key is None


@pytest.mark.asyncio
async def test_list_async_matches_sync(store, planner):
    _put(store, _submission(5), _submission(10), _submission(1))

    first = await planner.list_async(SUBMISSIONS_BY_TOPIC, "news", limit=2)
    second = await planner.list_async(
        SUBMISSIONS_BY_TOPIC, "news", limit=2, start_cursor=first.next_cursor
    )

    assert [s.ranking_score for s in first.items] == [1, 5]
    assert [s.ranking_score for s in second.items] == [10]
    assert second.next_cursor is None
