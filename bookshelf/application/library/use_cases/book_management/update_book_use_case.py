"""Update book use case."""

from collections.abc import Mapping

import structlog
from pydantic import ValidationError

from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import (
    BookChanges,
    BookRepositoryProtocol,
)
from bookshelf.domain.common.exceptions import DomainError
from bookshelf.domain.common.value_objects import BookId, OwnerId
from bookshelf.infrastructure.library.schemas import BookUpdate

logger = structlog.get_logger(__name__)


class UpdateBookUseCase:
    """Use case for updating book information."""

    def __init__(self, book_repository: BookRepositoryProtocol) -> None:
        self.book_repository = book_repository

    def update_book(
        self,
        owner_id: str | None,
        book_id: str,
        update_data: Mapping[str, object] | BookUpdate,
    ) -> Result[None, BookErrorCode]:
        """
        Apply a partial update to one of the caller's books.

        Only supplied fields are written. An update that supplies nothing is
        passed through and the repository turns it into a no-op.
        """
        if not owner_id:
            return Failure(BookErrorCode.GENERIC)
        try:
            data = BookUpdate.model_validate(update_data)
            owner_id_vo = OwnerId(owner_id)
            book_id_vo = BookId(book_id)
        except (ValidationError, DomainError):
            logger.info("book_input_rejected", use_case="update_book", book_id=book_id)
            return Failure(BookErrorCode.GENERIC)

        changes = BookChanges(**data.changed_fields())

        try:
            self.book_repository.update(owner_id_vo, book_id_vo, changes)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.warning(
                "book_use_case_failed",
                use_case="update_book",
                book_id=book_id,
                error_code=str(code),
                exc_info=True,
            )
            return Failure(code)

        return Success(None)
