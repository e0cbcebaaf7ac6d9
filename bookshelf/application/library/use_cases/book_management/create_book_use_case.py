"""Create book use case."""

from collections.abc import Mapping

import structlog
from pydantic import ValidationError

from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import BookRepositoryProtocol
from bookshelf.domain.common.exceptions import DomainError
from bookshelf.domain.common.value_objects import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book
from bookshelf.infrastructure.library.schemas import BookCreate

logger = structlog.get_logger(__name__)


class CreateBookUseCase:
    """Use case for creating books."""

    def __init__(self, book_repository: BookRepositoryProtocol) -> None:
        self.book_repository = book_repository

    def create_book(
        self, owner_id: str | None, book_data: Mapping[str, object] | BookCreate
    ) -> Result[Book, BookErrorCode]:
        """
        Validate and store a new book owned by the caller.

        The book id is minted here, before the repository is called, so a
        caller retrying the same attempt can be recognised by its id.

        Args:
            owner_id: Identity of the caller, None when signed out
            book_data: Raw book fields (title, description, authors, genres, links)

        Returns:
            Success with the new Book, or Failure with a BookErrorCode
        """
        if not owner_id:
            return Failure(BookErrorCode.GENERIC)
        try:
            data = BookCreate.model_validate(book_data)
            owner_id_vo = OwnerId(owner_id)
        except (ValidationError, DomainError):
            logger.info("book_input_rejected", use_case="create_book")
            return Failure(BookErrorCode.GENERIC)

        book = Book.create(
            owner_id=owner_id_vo,
            title=data.title,
            description=data.description,
            authors=data.authors,
            genres=data.genres,
            links=data.links,
            book_id=BookId.generate(),
        )

        try:
            self.book_repository.create(owner_id_vo, book)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.warning(
                "book_use_case_failed",
                use_case="create_book",
                book_id=book.id.value,
                error_code=str(code),
                exc_info=True,
            )
            return Failure(code)

        return Success(book)
