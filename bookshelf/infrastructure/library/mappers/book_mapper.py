from datetime import UTC, datetime

from bookshelf.domain.common.value_objects.ids import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book, now_millis
from bookshelf.domain.library.services.search_text import (
    DEFAULT_MAX_LENGTH,
    NON_BLANK_SEARCH_TEXT_FALLBACK,
    normalize_search_text,
)
from bookshelf.models import BookDocument


def to_epoch_millis(value: object) -> int:
    """
    Read a stored timestamp as epoch milliseconds.

    Accepts plain integers and datetimes (naive ones are taken as UTC).
    Anything else, including a missing value, becomes the current time.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp() * 1000)
    return now_millis()


def search_text_for(title: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Search key stored alongside a title; never the empty string."""
    return normalize_search_text(title, max_length) or NON_BLANK_SEARCH_TEXT_FALLBACK


class BookMapper:
    """Mapper for BookDocument ↔ Domain conversion."""

    def __init__(self, search_text_max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.search_text_max_length = search_text_max_length

    def to_domain(self, document: BookDocument) -> Book:
        """Convert a stored document to a domain entity, tolerating partial rows."""
        return Book.create_with_id(
            id=BookId(document.id),
            owner_id=OwnerId(document.created_by or document.owner_id),
            title=document.title,
            description=document.description,
            authors=list(document.authors or []),
            genres=list(document.genres or []),
            links=list(document.links or []),
            created_at=to_epoch_millis(document.created_at),
            last_modified_at=to_epoch_millis(document.last_modified_at),
        )

    def to_document(self, owner_id: OwnerId, book: Book, written_at: int) -> BookDocument:
        """Build a new document; both timestamps are the moment of the write."""
        return BookDocument(
            owner_id=owner_id.value,
            id=book.id.value,
            title=book.title,
            description=book.description,
            authors=list(book.authors),
            genres=list(book.genres),
            links=list(book.links),
            created_by=book.owner_id.value,
            created_at=written_at,
            last_modified_at=written_at,
            search_text=self.search_text(book.title),
        )

    def search_text(self, title: str) -> str:
        return search_text_for(title, self.search_text_max_length)
