"""Find books use case."""

from typing import Literal

import structlog

from bookshelf.application.common.pagination import CursorPage
from bookshelf.application.common.result import Failure, Result, Success
from bookshelf.application.library.errors import BookErrorCode, classify_book_error
from bookshelf.application.library.protocols.book_repository import (
    BookQuery,
    BookRepositoryProtocol,
)
from bookshelf.domain.common.value_objects import OwnerId
from bookshelf.domain.library.entities.book import Book

logger = structlog.get_logger(__name__)

# Maximum allowed page size
MAX_PAGE_SIZE = 100


class FindBooksUseCase:
    """Use case for listing one page of the caller's books."""

    def __init__(
        self, book_repository: BookRepositoryProtocol, max_page_size: int = MAX_PAGE_SIZE
    ) -> None:
        self.book_repository = book_repository
        self.max_page_size = max_page_size

    def find_books(
        self,
        owner_id: str | None,
        page_size: int,
        search_term: str | None = None,
        page_cursor: str | None = None,
        order_by: Literal["title"] = "title",
    ) -> Result[CursorPage[Book], BookErrorCode]:
        """
        Get a page of books, optionally filtered by a title prefix.

        Without a caller identity the collection is treated as empty.

        Args:
            owner_id: Identity of the caller, None when signed out
            page_size: Number of books per page (1..max_page_size)
            search_term: Optional case and diacritic insensitive title prefix
            page_cursor: Cursor returned with the previous page
            order_by: Listing order; only "title" is supported

        Returns:
            Success with the page, or Failure with a BookErrorCode
        """
        if not owner_id or not owner_id.strip():
            return Success(CursorPage.empty())
        if not 1 <= page_size <= self.max_page_size:
            return Failure(BookErrorCode.GENERIC)

        query = BookQuery(
            page_size=page_size,
            order_by=order_by,
            search_term=search_term,
            page_cursor=page_cursor,
        )
        try:
            page = self.book_repository.find(OwnerId(owner_id), query)
        except Exception as exc:
            code = classify_book_error(exc)
            logger.warning(
                "book_use_case_failed", use_case="find_books", error_code=str(code), exc_info=True
            )
            return Failure(code)

        return Success(page)
