"""Key derivation: pure functions from entity attributes to composite keys.

Numeric sort fields are rendered as ten zero-padded decimal digits, so byte
order equals numeric order for 0 <= n <= 9,999,999,999. Anything outside that
range (negative ranking scores, pre-epoch timestamps) would silently break
ordering and is rejected instead.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from valnk.core.errors import InvalidAttributeError
from valnk.core.keys.models import IndexKey, PrimaryKey

SEPARATOR = "#"
PRIMARY_SORT_SENTINEL = "A"
SORT_NUMBER_WIDTH = 10
MAX_SORT_NUMBER = 10**SORT_NUMBER_WIDTH - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_TAG_LENGTH = 5


def _require_tag(tag: Any, attribute: str) -> str:
    if not (isinstance(tag, str) and len(tag) == _TAG_LENGTH and tag.isalpha() and tag.isupper()):
        raise InvalidAttributeError(attribute, f"expected a 5-letter uppercase tag, got {tag!r}")
    return tag


def _require_value(value: Any, attribute: str) -> str:
    if value is None:
        raise InvalidAttributeError(attribute, "value is absent")
    if not isinstance(value, str):
        raise InvalidAttributeError(attribute, f"expected a string, got {type(value).__name__}")
    if not value:
        raise InvalidAttributeError(attribute, "cannot be empty")
    if SEPARATOR in value:
        # A separator inside a value would leak into neighbouring prefixes.
        raise InvalidAttributeError(attribute, f"cannot contain {SEPARATOR!r}")
    return value


def partition_value(tag: str, value: Any, attribute: str = "grouping_value") -> str:
    """Render a partition as `{TAG}#{value}`.

    Args:
        tag: Kind or grouping tag.
        value: The grouping value or entity id.
        attribute: Field name reported in errors.

    Raises:
        InvalidAttributeError: If the tag or value is absent or malformed.
    """
    return f"{_require_tag(tag, 'tag')}{SEPARATOR}{_require_value(value, attribute)}"


def sort_prefix(kind_tag: str, parent: Any = None) -> str:
    """Literal sort-key prefix for `begins_with` filtering.

    Args:
        kind_tag: Tag of the entity kind stored under the index.
        parent: Optional parent id narrowing the prefix to one sub-group.

    Returns:
        `"{KIND_TAG}#"`, or `"{KIND_TAG}#{parent}#"` when parent is given.
    """
    prefix = f"{_require_tag(kind_tag, 'kind_tag')}{SEPARATOR}"
    if parent is None:
        return prefix
    return f"{prefix}{_require_value(parent, 'parent')}{SEPARATOR}"


def encode_sort_number(value: Any, attribute: str = "numeric_field") -> str:
    """Render a sortable number as exactly ten zero-padded digits.

    Raises:
        InvalidAttributeError: If value is absent, not an integer, or outside
            [0, 9_999_999_999].
    """
    if value is None:
        raise InvalidAttributeError(attribute, "value is absent")
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAttributeError(attribute, f"expected an integer, got {type(value).__name__}")
    if value < 0 or value > MAX_SORT_NUMBER:
        raise InvalidAttributeError(
            attribute, f"{value} is outside the sortable range [0, {MAX_SORT_NUMBER}]"
        )
    return f"{value:0{SORT_NUMBER_WIDTH}d}"


def timestamp_sort_number(moment: Any, attribute: str = "created_at") -> int:
    """Whole seconds since the Unix epoch, floored.

    Raises:
        InvalidAttributeError: If moment is absent or not timezone-aware.
    """
    if moment is None:
        raise InvalidAttributeError(attribute, "value is absent")
    if not isinstance(moment, datetime):
        raise InvalidAttributeError(attribute, f"expected a datetime, got {type(moment).__name__}")
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise InvalidAttributeError(attribute, "datetime must be timezone-aware")
    return (moment - _EPOCH) // timedelta(seconds=1)


def derive_primary_key(kind_tag: str, entity_id: Any) -> PrimaryKey:
    """Primary key of one record: `{KIND_TAG}#{id}` / `A`."""
    return PrimaryKey(
        partition=partition_value(kind_tag, entity_id, attribute="id"),
        sort=PRIMARY_SORT_SENTINEL,
    )


def derive_secondary_key(
    kind_tag: str,
    grouping_tag: str,
    grouping_value: Any,
    numeric_field: Any,
    *,
    parent: Any = None,
) -> IndexKey:
    """Secondary-index key grouping records by a foreign attribute.

    Args:
        kind_tag: Tag of the record's kind, leading the sort key.
        grouping_tag: Tag of the grouping dimension, leading the partition.
        grouping_value: Value records are grouped by (topic, parent id, author).
        numeric_field: Ordering value within the group.
        parent: Second foreign attribute, placed between kind tag and number.

    Returns:
        IndexKey `{GROUPING_TAG}#{value}` / `{KIND_TAG}#[{parent}#]{n:010}`.

    Raises:
        InvalidAttributeError: If any attribute is absent or out of range.
    """
    partition = partition_value(grouping_tag, grouping_value)
    prefix = sort_prefix(kind_tag, parent)
    return IndexKey(partition=partition, sort=f"{prefix}{encode_sort_number(numeric_field)}")
