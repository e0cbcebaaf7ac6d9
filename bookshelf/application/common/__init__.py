"""
Application common module.

Contains shared application types:
- Result: Success / Failure outcome of a use case
- CursorPage, PageCursor: keyset pagination primitives and the cursor codec
"""

from .pagination import (
    CursorField,
    CursorPage,
    PageCursor,
    decode_cursor,
    encode_cursor,
)
from .result import Failure, Result, Success

__all__ = [
    "CursorField",
    "CursorPage",
    "Failure",
    "PageCursor",
    "Result",
    "Success",
    "decode_cursor",
    "encode_cursor",
]
