from dataclasses import dataclass

from ..entity import EntityId


@dataclass(frozen=True)
class BookId(EntityId):
    """Strongly-typed book identifier (UUID v4 shaped)."""

    value: str


@dataclass(frozen=True)
class OwnerId(EntityId):
    """Identifier of the user who owns a book collection."""

    value: str
