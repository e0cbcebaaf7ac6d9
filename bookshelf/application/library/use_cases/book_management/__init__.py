"""Book management use cases."""

from .create_book_use_case import CreateBookUseCase
from .delete_book_use_case import DeleteBookUseCase
from .find_books_use_case import FindBooksUseCase
from .get_book_use_case import GetBookUseCase
from .update_book_use_case import UpdateBookUseCase

__all__ = [
    "CreateBookUseCase",
    "DeleteBookUseCase",
    "FindBooksUseCase",
    "GetBookUseCase",
    "UpdateBookUseCase",
]
