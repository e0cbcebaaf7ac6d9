"""Identity and invariant primitives shared by every domain module."""

from .entity import Entity, EntityId
from .exceptions import DomainError, ValidationError

__all__ = [
    "DomainError",
    "Entity",
    "EntityId",
    "ValidationError",
]
