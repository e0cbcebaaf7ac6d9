"""Get book use case."""

import structlog

from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import BookRepositoryProtocol
from bookshelf.domain.common.exceptions import DomainError
from bookshelf.domain.common.value_objects import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book

logger = structlog.get_logger(__name__)


class GetBookUseCase:
    """Use case for reading a single book."""

    def __init__(self, book_repository: BookRepositoryProtocol) -> None:
        self.book_repository = book_repository

    def get_book(self, owner_id: str | None, book_id: str) -> Result[Book, BookErrorCode]:
        """
        Get one of the caller's books.

        A missing book is NOT_FOUND; a store failure is UNAVAILABLE or GENERIC.
        """
        if not owner_id:
            return Failure(BookErrorCode.GENERIC)
        try:
            owner_id_vo = OwnerId(owner_id)
            book_id_vo = BookId(book_id)
        except DomainError:
            return Failure(BookErrorCode.GENERIC)

        try:
            book = self.book_repository.get(owner_id_vo, book_id_vo)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.warning(
                "book_use_case_failed",
                use_case="get_book",
                book_id=book_id,
                error_code=str(code),
                exc_info=True,
            )
            return Failure(code)

        if book is None:
            return Failure(BookErrorCode.NOT_FOUND)
        return Success(book)
