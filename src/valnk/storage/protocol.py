"""Storage protocol for swappable document-store backends.

The storage layer abstracts the key-value range-query service holding the
shared table:
- put-by-primary-key
- scan one secondary-index partition, filtered by sort-key prefix, in either
  direction, with a result limit and an exclusive start key

Usage:
    store = LocalStore()
    planner = IndexQueryPlanner(store)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

Item = dict[str, Any]


class TransportError(Exception):
    """Raised by backends for upstream failures (timeouts, throttling, permissions)."""

    pass


@dataclass(frozen=True, slots=True)
class ScanRequest:
    """One range scan against a secondary index.

    Attributes:
        index_name: Physical index to scan.
        partition_attribute: Attribute holding the index partition.
        partition_value: Exact partition to scan.
        sort_attribute: Attribute holding the index sort key.
        sort_prefix: Only items whose sort key begins with this are returned.
        limit: Maximum number of items to return.
        reverse: Descending sort order when True.
        exclusive_start_key: Position to resume after, or None from the start.
    """

    index_name: str
    partition_attribute: str
    partition_value: str
    sort_attribute: str
    sort_prefix: str
    limit: int
    reverse: bool = False
    exclusive_start_key: Mapping[str, Any] | None = None


@dataclass(slots=True)
class ScanResult:
    """Raw scan output.

    Attributes:
        items: Raw items in scan order, at most `limit` of them.
        last_evaluated_key: Key of the last item examined, set only when more
            items may remain.
    """

    items: list[Item] = field(default_factory=list)
    last_evaluated_key: Item | None = None


@runtime_checkable
class DocumentStore(Protocol):
    """Abstract store interface. Implementations handle transport and retries."""

    def put_item(self, item: Mapping[str, Any]) -> None:
        """Insert or replace the item with the same primary key."""
        ...

    def query(self, request: ScanRequest) -> ScanResult:
        """Scan one index partition."""
        ...

    # Async variants for remote store backends

    async def put_item_async(self, item: Mapping[str, Any]) -> None:
        """Insert or replace an item (async variant)."""
        ...

    async def query_async(self, request: ScanRequest) -> ScanResult:
        """Scan one index partition (async variant)."""
        ...
