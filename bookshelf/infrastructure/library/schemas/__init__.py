from .book_schemas import (
    Book,
    BookCreate,
    BooksPageResponse,
    BookUpdate,
)

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "BooksPageResponse",
]
