from typing import Annotated, Any, NoReturn

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from starlette import status

from bookshelf.application.library.errors import BookErrorCode
from bookshelf.application.library.use_cases.book_management import (
    CreateBookUseCase,
    DeleteBookUseCase,
    FindBooksUseCase,
    GetBookUseCase,
    UpdateBookUseCase,
)
from bookshelf.config import get_settings
from bookshelf.core import container
from bookshelf.infrastructure.common.di import inject_use_case
from bookshelf.infrastructure.identity.dependencies import CurrentOwnerId
from bookshelf.infrastructure.library.schemas import Book, BooksPageResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

_STATUS_BY_ERROR = {
    BookErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookErrorCode.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    BookErrorCode.GENERIC: status.HTTP_400_BAD_REQUEST,
}


def _raise_book_error(error: BookErrorCode) -> NoReturn:
    """Translate a use-case error code into an HTTP error response."""
    raise HTTPException(status_code=_STATUS_BY_ERROR[error], detail=str(error))


@router.get("", response_model=BooksPageResponse, status_code=status.HTTP_200_OK)
def list_books(
    owner_id: CurrentOwnerId,
    use_case: Annotated[FindBooksUseCase, Depends(inject_use_case(container.find_books_use_case))],
    search: Annotated[str | None, Query(description="Title prefix")] = None,
    page_size: Annotated[int | None, Query(description="Books per page")] = None,
    cursor: Annotated[str | None, Query(description="next_cursor of the previous page")] = None,
) -> BooksPageResponse:
    """
    List the caller's books ordered by title.

    With ``search`` the listing switches to a case and diacritic insensitive
    title prefix match. Pass the returned ``next_cursor`` back as ``cursor``
    to load the next page.
    """
    result = use_case.find_books(
        owner_id=owner_id,
        page_size=get_settings().DEFAULT_PAGE_SIZE if page_size is None else page_size,
        search_term=search,
        page_cursor=cursor,
    )
    if result.is_failure:
        _raise_book_error(result.unwrap_error())
    return BooksPageResponse.from_page(result.unwrap())


@router.get("/{book_id}", response_model=Book, status_code=status.HTTP_200_OK)
def get_book(
    book_id: str,
    owner_id: CurrentOwnerId,
    use_case: Annotated[GetBookUseCase, Depends(inject_use_case(container.get_book_use_case))],
) -> Book:
    """Get one of the caller's books."""
    result = use_case.get_book(owner_id, book_id)
    if result.is_failure:
        _raise_book_error(result.unwrap_error())
    return Book.from_entity(result.unwrap())


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
def create_book(
    owner_id: CurrentOwnerId,
    payload: Annotated[dict[str, Any], Body()],
    use_case: Annotated[
        CreateBookUseCase, Depends(inject_use_case(container.create_book_use_case))
    ],
) -> Book:
    """Create a book owned by the caller. The server assigns the id."""
    result = use_case.create_book(owner_id, payload)
    if result.is_failure:
        _raise_book_error(result.unwrap_error())
    book = result.unwrap()
    logger.debug("book_create_request_completed", book_id=book.id.value)
    return Book.from_entity(book)


@router.patch("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_book(
    book_id: str,
    owner_id: CurrentOwnerId,
    payload: Annotated[dict[str, Any], Body()],
    use_case: Annotated[
        UpdateBookUseCase, Depends(inject_use_case(container.update_book_use_case))
    ],
) -> Response:
    """Update the supplied fields of one of the caller's books."""
    result = use_case.update_book(owner_id, book_id, payload)
    if result.is_failure:
        _raise_book_error(result.unwrap_error())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    book_id: str,
    owner_id: CurrentOwnerId,
    use_case: Annotated[
        DeleteBookUseCase, Depends(inject_use_case(container.delete_book_use_case))
    ],
) -> Response:
    """Delete one of the caller's books."""
    result = use_case.delete_book(owner_id, book_id)
    if result.is_failure:
        _raise_book_error(result.unwrap_error())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
