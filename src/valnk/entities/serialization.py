"""Conversion between entity records and raw store items.

Items are flat attribute maps: the key pairs under their physical attribute
names, the `entity_type` discriminant, then the business fields with
timestamps as ISO-8601 strings.

Usage:
    item = to_item(submission)
    store.put_item(item)
    restored = from_item(Submission, item)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import datetime
from functools import cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from valnk.core.errors import InvalidAttributeError, InvalidOutputDataError
from valnk.core.keys import GSI1_LAYOUT, GSI2_LAYOUT, PRIMARY_LAYOUT, KeyLayout
from valnk.entities.models import Record

R = TypeVar("R", bound=Record)

ENTITY_TYPE_ATTRIBUTE = "entity_type"
KEY_ATTRIBUTES = frozenset(
    PRIMARY_LAYOUT.attributes + GSI1_LAYOUT.attributes + GSI2_LAYOUT.attributes
)


@cache
def _adapter(record_type: type[R]) -> TypeAdapter[R]:
    return TypeAdapter(record_type)


def to_item(record: Record) -> dict[str, Any]:
    """Flatten a record and its keys into a store item.

    Args:
        record: Submission, Comment or Reply.

    Returns:
        Attribute map ready for `DocumentStore.put_item`.
    """
    item: dict[str, Any] = {}
    item.update(record.keys.primary.as_item())
    item.update(record.keys.group.as_item(GSI1_LAYOUT))
    item.update(record.keys.author.as_item(GSI2_LAYOUT))
    item[ENTITY_TYPE_ATTRIBUTE] = record.entity_type.value

    for field in dataclasses.fields(record):
        if field.name == "keys":
            continue
        value = getattr(record, field.name)
        item[field.name] = value.isoformat() if isinstance(value, datetime) else value
    return item


def key_position(item: Mapping[str, Any], *layouts: KeyLayout) -> dict[str, Any]:
    """Extract the table key plus the given index keys from an item.

    Raises:
        InvalidOutputDataError: If any key attribute is missing.
    """
    attributes = PRIMARY_LAYOUT.attributes + tuple(
        name for layout in layouts for name in layout.attributes
    )
    try:
        return {name: item[name] for name in attributes}
    except KeyError as e:
        raise InvalidOutputDataError(f"item is missing key attribute `{e.args[0]}`") from e


def from_item(record_type: type[R], item: Mapping[str, Any]) -> R:
    """Rebuild a typed record from a raw store item.

    Args:
        record_type: Expected record class.
        item: Raw attribute map returned by the store.

    Returns:
        The validated record.

    Raises:
        InvalidOutputDataError: If the item belongs to another kind, fails
            validation, or carries keys that differ from the ones its
            attributes derive.
    """
    expected = record_type.entity_type.value
    actual = item.get(ENTITY_TYPE_ATTRIBUTE)
    if actual != expected:
        raise InvalidOutputDataError(f"expected entity_type `{expected}`, found {actual!r}")

    keys = key_position(item, GSI1_LAYOUT, GSI2_LAYOUT)
    data = {
        name: value
        for name, value in item.items()
        if name not in KEY_ATTRIBUTES and name != ENTITY_TYPE_ATTRIBUTE
    }
    data["keys"] = {
        "primary": {"partition": keys[PRIMARY_LAYOUT.partition], "sort": keys[PRIMARY_LAYOUT.sort]},
        "group": {"partition": keys[GSI1_LAYOUT.partition], "sort": keys[GSI1_LAYOUT.sort]},
        "author": {"partition": keys[GSI2_LAYOUT.partition], "sort": keys[GSI2_LAYOUT.sort]},
    }

    try:
        record = _adapter(record_type).validate_python(data)
    except ValidationError as e:
        raise InvalidOutputDataError(
            f"item does not match {record_type.__name__}: {e.error_count()} validation error(s)"
        ) from e

    try:
        fresh = record.fresh_keys()
    except InvalidAttributeError as e:
        raise InvalidOutputDataError(f"stored attributes cannot derive keys: {e}") from e
    if fresh != record.keys:
        raise InvalidOutputDataError(
            f"stored keys of {record_type.__name__} `{record.id}` differ from derived keys"
        )
    return record
