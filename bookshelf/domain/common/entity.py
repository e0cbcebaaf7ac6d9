"""
Identifiers and the identity-equality base for entities.

Two books are the same book when their ids match, whatever their titles say.
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, Self, TypeVar
from uuid import uuid4

from .exceptions import ValidationError


@dataclass(frozen=True)
class EntityId:
    """
    Base class for strongly-typed string identifiers.

    Identifiers are opaque non-empty strings. New ones are minted client-side
    as UUID v4 so a retried creation carries the same id as the first attempt.

    Example:
        book_id = BookId.generate()
        owner_id = OwnerId("uid-42")
        # Different types, so they cannot be swapped by accident
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError(
                f"{self.__class__.__name__} must be a non-empty string", field="id"
            )

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Mint a fresh UUID v4 identifier."""
        return cls(str(uuid4()))


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """Compares and hashes by ``id`` only. Subclasses are ``@dataclass(eq=False)``."""

    id: IdType

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
