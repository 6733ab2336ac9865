"""Key models and the physical attribute layout of the shared table.

Every item carries a primary key (`PK`/`SK`) and up to two secondary-index
keys (`GSI1_PK`/`GSI1_SK`, `GSI2_PK`/`GSI2_SK`):

    PK             SK  GSI1_PK          GSI1_SK                 GSI2_PK     GSI2_SK
    SUBMS#<id>     A   TOPIC#<topic>    SUBMS#<score>           AUTHR#<a>   SUBMS#<ts>
    COMMT#<id>     A   SUBMS#<subm id>  COMMT#<score>           AUTHR#<a>   COMMT#<ts>
    REPLY#<id>     A   SUBMS#<subm id>  REPLY#<comm id>#<ts>    AUTHR#<a>   REPLY#<ts>
"""

from __future__ import annotations

from dataclasses import dataclass

from valnk.core.identity import EntityType

SUBMISSION_TAG = "SUBMS"
COMMENT_TAG = "COMMT"
REPLY_TAG = "REPLY"
TOPIC_TAG = "TOPIC"
AUTHOR_TAG = "AUTHR"

KIND_TAGS: dict[EntityType, str] = {
    EntityType.SUBMISSION: SUBMISSION_TAG,
    EntityType.COMMENT: COMMENT_TAG,
    EntityType.REPLY: REPLY_TAG,
}


@dataclass(frozen=True, slots=True)
class KeyLayout:
    """Attribute names holding one key pair on a stored item.

    Attributes:
        index_name: Secondary index name, None for the table's primary key.
        partition: Attribute holding the partition value.
        sort: Attribute holding the sort value.
    """

    index_name: str | None
    partition: str
    sort: str

    @property
    def attributes(self) -> tuple[str, str]:
        return (self.partition, self.sort)


PRIMARY_LAYOUT = KeyLayout(index_name=None, partition="PK", sort="SK")
GSI1_LAYOUT = KeyLayout(index_name="GSI1", partition="GSI1_PK", sort="GSI1_SK")
GSI2_LAYOUT = KeyLayout(index_name="GSI2", partition="GSI2_PK", sort="GSI2_SK")


@dataclass(frozen=True, slots=True)
class PrimaryKey:
    """Uniquely identifies one record: `<KIND_TAG>#<id>` / `A`."""

    partition: str
    sort: str

    def as_item(self) -> dict[str, str]:
        return {PRIMARY_LAYOUT.partition: self.partition, PRIMARY_LAYOUT.sort: self.sort}


@dataclass(frozen=True, slots=True)
class IndexKey:
    """Secondary-index key pair, grouped by a foreign attribute."""

    partition: str
    sort: str

    def as_item(self, layout: KeyLayout) -> dict[str, str]:
        """Render under the attribute names of the given index."""
        return {layout.partition: self.partition, layout.sort: self.sort}
