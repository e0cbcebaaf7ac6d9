from dataclasses import dataclass, fields
from typing import Literal, Protocol

from bookshelf.application.common.pagination import CursorPage
from bookshelf.domain.common.value_objects.ids import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book


@dataclass(frozen=True)
class BookQuery:
    """Listing parameters for one page of an owner's books."""

    page_size: int
    order_by: Literal["title"] = "title"
    search_term: str | None = None
    page_cursor: str | None = None


@dataclass(frozen=True)
class BookChanges:
    """Partial update of a book. None means "leave this field untouched"."""

    title: str | None = None
    description: str | None = None
    authors: list[str] | None = None
    genres: list[str] | None = None
    links: list[str] | None = None

    def present(self) -> dict[str, object]:
        """Fields that carry a value, keyed by attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.present()


class BookRepositoryProtocol(Protocol):
    def find(self, owner_id: OwnerId, query: BookQuery) -> CursorPage[Book]: ...

    def get(self, owner_id: OwnerId, book_id: BookId) -> Book | None: ...

    def create(self, owner_id: OwnerId, book: Book) -> None: ...

    def update(self, owner_id: OwnerId, book_id: BookId, changes: BookChanges) -> None: ...

    def delete(self, owner_id: OwnerId, book_id: BookId) -> None: ...

    def delete_all(self, owner_id: OwnerId) -> None: ...
