"""Delete book use case."""

import structlog

from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import BookRepositoryProtocol
from bookshelf.domain.common.exceptions import DomainError
from bookshelf.domain.common.value_objects import BookId, OwnerId

logger = structlog.get_logger(__name__)


class DeleteBookUseCase:
    """Use case for deleting books."""

    def __init__(self, book_repository: BookRepositoryProtocol) -> None:
        self.book_repository = book_repository

    def delete_book(self, owner_id: str | None, book_id: str) -> Result[None, BookErrorCode]:
        """Hard delete one of the caller's books. Deleting a missing book succeeds."""
        if not owner_id:
            return Failure(BookErrorCode.GENERIC)
        try:
            owner_id_vo = OwnerId(owner_id)
            book_id_vo = BookId(book_id)
        except DomainError:
            return Failure(BookErrorCode.GENERIC)

        try:
            self.book_repository.delete(owner_id_vo, book_id_vo)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.warning(
                "book_use_case_failed",
                use_case="delete_book",
                book_id=book_id,
                error_code=str(code),
                exc_info=True,
            )
            return Failure(code)

        return Success(None)
