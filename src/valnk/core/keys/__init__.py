"""Key encoding: tags, attribute layout and derivation functions."""

from valnk.core.keys.models import (
    AUTHOR_TAG,
    COMMENT_TAG,
    GSI1_LAYOUT,
    GSI2_LAYOUT,
    KIND_TAGS,
    PRIMARY_LAYOUT,
    REPLY_TAG,
    SUBMISSION_TAG,
    TOPIC_TAG,
    IndexKey,
    KeyLayout,
    PrimaryKey,
)
from valnk.core.keys.operations import (
    MAX_SORT_NUMBER,
    PRIMARY_SORT_SENTINEL,
    SEPARATOR,
    derive_primary_key,
    derive_secondary_key,
    encode_sort_number,
    partition_value,
    sort_prefix,
    timestamp_sort_number,
)

__all__ = [
    # Tags
    "SUBMISSION_TAG",
    "COMMENT_TAG",
    "REPLY_TAG",
    "TOPIC_TAG",
    "AUTHOR_TAG",
    "KIND_TAGS",
    # Models
    "PrimaryKey",
    "IndexKey",
    "KeyLayout",
    "PRIMARY_LAYOUT",
    "GSI1_LAYOUT",
    "GSI2_LAYOUT",
    # Operations
    "SEPARATOR",
    "PRIMARY_SORT_SENTINEL",
    "MAX_SORT_NUMBER",
    "derive_primary_key",
    "derive_secondary_key",
    "encode_sort_number",
    "partition_value",
    "sort_prefix",
    "timestamp_sort_number",
]
