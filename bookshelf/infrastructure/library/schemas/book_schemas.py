"""Pydantic schemas for Book input validation and API responses."""

from typing import Any

from pydantic import BaseModel, Field

from bookshelf.application.common.pagination import CursorPage
from bookshelf.domain.library.entities.book import Book as BookEntity

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class BookCreate(BaseModel):
    """Schema for creating a Book."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Book title")
    description: str = Field(
        ..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH, description="Book description"
    )
    authors: list[str] = Field(..., min_length=1, description="Authors, at least one")
    genres: list[str] = Field(default_factory=list, description="Genres")
    links: list[str] = Field(default_factory=list, description="Related URLs")


class BookUpdate(BaseModel):
    """Schema for a partial Book update. Omitted or null fields are left untouched."""

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    authors: list[str] | None = Field(None, min_length=1)
    genres: list[str] | None = None
    links: list[str] | None = None

    def changed_fields(self) -> dict[str, Any]:
        """Fields the caller actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Book(BaseModel):
    """Schema for Book response."""

    id: str
    title: str
    description: str
    authors: list[str]
    genres: list[str]
    links: list[str]
    created_by: str
    created_at: int = Field(..., description="Epoch milliseconds")
    last_modified_at: int = Field(..., description="Epoch milliseconds")

    @classmethod
    def from_entity(cls, book: BookEntity) -> "Book":
        return cls(
            id=book.id.value,
            title=book.title,
            description=book.description,
            authors=book.authors,
            genres=book.genres,
            links=book.links,
            created_by=book.owner_id.value,
            created_at=book.created_at,
            last_modified_at=book.last_modified_at,
        )


class BooksPageResponse(BaseModel):
    """Schema for one page of a books listing."""

    items: list[Book] = Field(..., description="Books on this page")
    next_cursor: str | None = Field(
        None, description="Cursor for the next page, null on the last page"
    )
    has_more: bool = Field(..., description="Whether another page exists")

    @classmethod
    def from_page(cls, page: CursorPage[BookEntity]) -> "BooksPageResponse":
        return cls(
            items=[Book.from_entity(book) for book in page.items],
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )
