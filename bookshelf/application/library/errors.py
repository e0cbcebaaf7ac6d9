"""
Closed error taxonomy for book use cases.

Callers above the use-case layer only ever see one of these three codes,
never a raw store exception.
"""

from enum import StrEnum

from bookshelf.exceptions import StoreUnavailableError

UNAVAILABLE_PATTERNS = (
    "permission",
    "unavailable",
    "network",
    "failed to fetch",
)


class BookErrorCode(StrEnum):
    """Why a book use case failed."""

    NOT_FOUND = "not-found"
    UNAVAILABLE = "unavailable"
    GENERIC = "generic"


def classify_book_error(error: object) -> BookErrorCode:
    """
    Narrow an exception raised below the use-case layer into a BookErrorCode.

    Connectivity and permission failures map to UNAVAILABLE, either by type
    or by the wording of the message (including the message of the chained
    cause). Everything else is GENERIC.
    """
    if isinstance(error, StoreUnavailableError):
        return BookErrorCode.UNAVAILABLE
    if not isinstance(error, Exception):
        return BookErrorCode.GENERIC

    messages = [str(error)]
    if error.__cause__ is not None:
        messages.append(str(error.__cause__))
    text = " ".join(messages).lower()
    if any(pattern in text for pattern in UNAVAILABLE_PATTERNS):
        return BookErrorCode.UNAVAILABLE
    return BookErrorCode.GENERIC
