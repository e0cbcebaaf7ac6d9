"""Custom exception hierarchy for the Bookshelf application."""


class BookshelfError(Exception):
    """Base exception for all Bookshelf errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class BookStoreError(BookshelfError):
    """The book store rejected or failed a request after it was reached."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        """Initialize with the store's message and the repository operation."""
        self.operation = operation
        super().__init__(message, status_code=500)


class StoreUnavailableError(BookStoreError):
    """The book store could not be reached (connection, permission, network)."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message, operation=operation)
        self.status_code = 503
