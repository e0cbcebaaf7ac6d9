from dependency_injector import containers, providers

from bookshelf.application.identity.use_cases.delete_account_use_case import (
    DeleteAccountUseCase,
)
from bookshelf.application.library.use_cases.book_management import (
    CreateBookUseCase,
    DeleteBookUseCase,
    FindBooksUseCase,
    GetBookUseCase,
    UpdateBookUseCase,
)
from bookshelf.config import get_settings
from bookshelf.infrastructure.library.repositories import BookRepository


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    settings = providers.Singleton(get_settings)

    # Store handle function (SessionProvider), provided per request at runtime
    get_session = providers.Dependency()

    # Account service from the authentication provider, wired by the host app
    account_service = providers.Dependency()

    # Repositories
    book_repository = providers.Factory(
        BookRepository,
        get_session=get_session,
        batch_size=settings.provided.DELETE_BATCH_SIZE,
        search_text_max_length=settings.provided.SEARCH_TEXT_MAX_LENGTH,
    )

    # Library module, application use cases
    find_books_use_case = providers.Factory(
        FindBooksUseCase,
        book_repository=book_repository,
        max_page_size=settings.provided.MAX_PAGE_SIZE,
    )
    get_book_use_case = providers.Factory(GetBookUseCase, book_repository=book_repository)
    create_book_use_case = providers.Factory(CreateBookUseCase, book_repository=book_repository)
    update_book_use_case = providers.Factory(UpdateBookUseCase, book_repository=book_repository)
    delete_book_use_case = providers.Factory(DeleteBookUseCase, book_repository=book_repository)

    # Identity module
    delete_account_use_case = providers.Factory(
        DeleteAccountUseCase,
        account_service=account_service,
        book_repository=book_repository,
    )


container = Container()
