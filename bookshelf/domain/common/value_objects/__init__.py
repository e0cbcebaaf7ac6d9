"""Common value objects shared across all domain modules."""

from .ids import BookId, OwnerId

__all__ = [
    "BookId",
    "OwnerId",
]
