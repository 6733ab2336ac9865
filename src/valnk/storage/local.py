"""Local in-memory store implementation.

Simple dict-based backend suitable for single-process use and testing. It
follows the range-query semantics of the real service: partition equality,
`begins_with` on the sort key, direction, limit and exclusive start key.

Usage:
    store = LocalStore()
    store.put_item(to_item(submission))
"""

from __future__ import annotations

import copy as cp
import logging
from collections.abc import Mapping
from typing import Any

from valnk.core.keys import PRIMARY_LAYOUT
from valnk.storage.protocol import Item, ScanRequest, ScanResult, TransportError

logger = logging.getLogger(__name__)


class LocalStore:
    """In-memory table keyed by primary key.

    Structure:
        _items[(PK, SK)] = item

    Items sharing an index sort value are ordered by their primary key, so
    pagination over ties is deterministic.
    """

    def __init__(self) -> None:
        self._items: dict[tuple[str, str], Item] = {}

    def __len__(self) -> int:
        return len(self._items)

    def _primary(self, item: Mapping[str, Any]) -> tuple[str, str]:
        try:
            return (item[PRIMARY_LAYOUT.partition], item[PRIMARY_LAYOUT.sort])
        except KeyError as e:
            raise TransportError(
                f"ValidationException: missing key attribute `{e.args[0]}`"
            ) from e

    def _order(self, request: ScanRequest, item: Mapping[str, Any]) -> tuple[str, str, str]:
        return (item[request.sort_attribute], *self._primary(item))

    def put_item(self, item: Mapping[str, Any]) -> None:
        """Insert or replace an item.

        Args:
            item: Attribute map carrying at least `PK` and `SK`.

        Raises:
            TransportError: If the primary key attributes are missing.
        """
        key = self._primary(item)
        self._items[key] = cp.deepcopy(dict(item))
        logger.debug("Stored item %s/%s", *key)

    def get_item(self, partition: str, sort: str) -> Item | None:
        """Get a copy of the item with this primary key, None if absent."""
        item = self._items.get((partition, sort))
        return cp.deepcopy(item) if item is not None else None

    def query(self, request: ScanRequest) -> ScanResult:
        """Scan one index partition.

        Items without the index attributes are not part of the index, the
        same way sparse secondary indexes behave.

        Args:
            request: Scan parameters.

        Returns:
            Up to `request.limit` items, plus the key of the last one when more
            matching items remain.

        Raises:
            TransportError: If the limit is not positive.
        """
        if request.limit <= 0:
            raise TransportError("ValidationException: limit must be positive")

        matching = [
            item
            for item in self._items.values()
            if item.get(request.partition_attribute) == request.partition_value
            and isinstance(item.get(request.sort_attribute), str)
            and item[request.sort_attribute].startswith(request.sort_prefix)
        ]
        matching.sort(key=lambda item: self._order(request, item), reverse=request.reverse)

        if request.exclusive_start_key is not None:
            if request.sort_attribute not in request.exclusive_start_key:
                raise TransportError(
                    f"ValidationException: start key is missing `{request.sort_attribute}`"
                )
            start = self._order(request, request.exclusive_start_key)
            if request.reverse:
                matching = [item for item in matching if self._order(request, item) < start]
            else:
                matching = [item for item in matching if self._order(request, item) > start]

        page = matching[: request.limit]
        last_key: Item | None = None
        if len(matching) > request.limit:
            last = page[-1]
            last_key = {
                name: last[name]
                for name in (
                    *PRIMARY_LAYOUT.attributes,
                    request.partition_attribute,
                    request.sort_attribute,
                )
            }

        return ScanResult(items=[cp.deepcopy(item) for item in page], last_evaluated_key=last_key)

    async def put_item_async(self, item: Mapping[str, Any]) -> None:
        """Insert or replace an item (async variant)."""
        self.put_item(item)

    async def query_async(self, request: ScanRequest) -> ScanResult:
        """Scan one index partition (async variant)."""
        return self.query(request)
