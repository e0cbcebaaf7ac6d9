import time
from dataclasses import dataclass, field

from bookshelf.domain.common.entity import Entity
from bookshelf.domain.common.exceptions import ValidationError
from bookshelf.domain.common.value_objects.ids import BookId, OwnerId


def now_millis() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(eq=False)
class Book(Entity[BookId]):
    """
    Book aggregate root.

    One row of a user's catalogue. The owner is fixed at creation time and
    both timestamps are epoch milliseconds.
    """

    # Identity
    id: BookId
    owner_id: OwnerId

    # Essential metadata
    title: str
    description: str
    authors: list[str]

    # Timestamps
    created_at: int
    last_modified_at: int

    # Optional collections
    genres: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.last_modified_at < self.created_at:
            raise ValidationError(
                "Book cannot be modified before it was created",
                field="last_modified_at",
            )

    # Factory methods
    @classmethod
    def create(
        cls,
        owner_id: OwnerId,
        title: str,
        description: str,
        authors: list[str],
        genres: list[str] | None = None,
        links: list[str] | None = None,
        book_id: BookId | None = None,
    ) -> "Book":
        """Factory for a new book; mints the id unless the caller supplies one."""
        now = now_millis()
        return cls(
            id=book_id or BookId.generate(),
            owner_id=owner_id,
            title=title,
            description=description,
            authors=list(authors),
            genres=list(genres or []),
            links=list(links or []),
            created_at=now,
            last_modified_at=now,
        )

    @classmethod
    def create_with_id(
        cls,
        id: BookId,
        owner_id: OwnerId,
        title: str,
        description: str,
        authors: list[str],
        genres: list[str],
        links: list[str],
        created_at: int,
        last_modified_at: int,
    ) -> "Book":
        """Factory for reconstituting a book from persistence."""
        return cls(
            id=id,
            owner_id=owner_id,
            title=title,
            description=description,
            authors=authors,
            genres=genres,
            links=links,
            created_at=created_at,
            last_modified_at=max(last_modified_at, created_at),
        )
