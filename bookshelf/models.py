"""Database models."""

from sqlalchemy import JSON, BigInteger, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookshelf.database import Base


class BookDocument(Base):
    """
    Stored book document.

    Rows are keyed by (owner_id, id) so every owner has an isolated id space,
    the relational counterpart of an ``users/{owner_id}/books/{id}`` path.
    Array and timestamp columns are nullable because older or partially
    written documents may lack them.
    """

    __tablename__ = "books"

    owner_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    authors: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    genres: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    links: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    last_modified_at: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    # Denormalized search key derived from title
    search_text: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("ix_books_owner_title_id", "owner_id", "title", "id"),
        Index("ix_books_owner_search_text_id", "owner_id", "search_text", "id"),
    )

    def __repr__(self) -> str:
        """String representation of BookDocument."""
        return f"<BookDocument(owner_id={self.owner_id!r}, id={self.id!r}, title={self.title!r})>"
