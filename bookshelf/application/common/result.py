"""
Outcome type returned by every use case.

Use cases never leak store exceptions to their callers. They return either
a Success carrying the value or a Failure carrying a closed error code.

Example:
    result = get_book_use_case.get_book(owner_id, book_id)
    if result.is_success:
        render(result.unwrap())
    elif result.unwrap_error() is BookErrorCode.NOT_FOUND:
        show_missing()
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    is_success = True
    is_failure = False

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> None:
        raise ValueError(f"{self!r} carries no error")


@dataclass(frozen=True)
class Failure(Generic[E]):
    error: E

    is_success = False
    is_failure = True

    def unwrap(self) -> None:
        raise ValueError(f"{self!r} carries no value")

    def unwrap_error(self) -> E:
        return self.error


Result = Success[T] | Failure[E]
