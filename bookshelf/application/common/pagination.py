"""
Keyset pagination types and the page cursor codec.

A page cursor records where the previous page stopped: the field the listing
was ordered by, that field's value on the last returned item, and the item's
id as a tie-break. Resuming "strictly after (value, id)" never skips or
repeats rows that share the same order value.

Example:
    page = book_repository.find(owner_id, BookQuery(page_size=20))
    while page.has_more:
        page = book_repository.find(
            owner_id, BookQuery(page_size=20, page_cursor=page.next_cursor)
        )

Cursors are opaque to every caller. On the wire they are compact JSON,
base64url encoded without padding so they can travel in a query string.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class CursorField(StrEnum):
    """Fields a book listing can be ordered by."""

    TITLE = "title"
    SEARCH_TEXT = "searchText"


@dataclass(frozen=True)
class PageCursor:
    """Decoded position of the last item of a page."""

    field: CursorField
    value: str
    id: str


@dataclass(frozen=True)
class CursorPage(Generic[T]):
    """
    One page of a keyset-paginated listing.

    Attributes:
        items: Items of the current page, in listing order
        next_cursor: Cursor resuming after the last item, None on the last page
        has_more: Whether at least one more item exists after this page
    """

    items: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False

    @classmethod
    def empty(cls) -> "CursorPage[T]":
        """An exhausted page with no items."""
        return cls(items=[], next_cursor=None, has_more=False)


def encode_cursor(field: CursorField | str, value: str, id: str) -> str:
    """
    Serialize a cursor position into an opaque token.

    Args:
        field: Ordering field the position belongs to
        value: Value of the ordering field on the last returned item
        id: Id of the last returned item

    Returns:
        URL-safe opaque string
    """
    payload = json.dumps(
        {"field": str(field), "value": value, "id": id},
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).rstrip(b"=").decode("ascii")


def decode_cursor(cursor: str | None) -> PageCursor | None:
    """
    Parse an opaque cursor back into a position.

    Never raises: missing, garbled or unsupported cursors all decode to None,
    which callers treat as "start from the beginning".
    """
    if not cursor or not isinstance(cursor, str):
        return None
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        parsed = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError, RecursionError):
        return None

    if not isinstance(parsed, dict):
        return None
    try:
        cursor_field = CursorField(parsed.get("field"))
    except ValueError:
        return None
    value = parsed.get("value")
    item_id = parsed.get("id")
    if not isinstance(value, str) or not isinstance(item_id, str):
        return None
    return PageCursor(field=cursor_field, value=value, id=item_id)
