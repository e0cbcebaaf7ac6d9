from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import structlog
from sqlalchemy import Delete, Select, Update, and_, delete, or_, select, update
from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import InstrumentedAttribute, Session

from bookshelf.application.common.pagination import (
    CursorField,
    CursorPage,
    decode_cursor,
    encode_cursor,
)
from bookshelf.application.library.protocols.book_repository import BookChanges, BookQuery
from bookshelf.config import STORE_BATCH_LIMIT
from bookshelf.database import SessionProvider
from bookshelf.domain.common.value_objects.ids import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book, now_millis
from bookshelf.domain.library.services.search_text import (
    DEFAULT_MAX_LENGTH,
    normalize_search_text,
)
from bookshelf.exceptions import BookStoreError, StoreUnavailableError
from bookshelf.infrastructure.library.mappers.book_mapper import BookMapper
from bookshelf.models import BookDocument

logger = structlog.get_logger(__name__)

# Last code point of the BMP private-use area; [prefix, prefix + END] spans a prefix
SEARCH_RANGE_END = "\uf8ff"

_UNREACHABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)

StatementT = TypeVar("StatementT", Select[Any], Update, Delete)


class BookRepository:
    """
    Owner-scoped, keyset-paginated repository for book documents.

    The store handle comes from ``get_session`` on every call. When it
    returns None the store is unavailable: reads come back empty and writes
    are skipped. Store failures after the store was reached are rolled back
    and re-raised as BookStoreError.
    """

    def __init__(
        self,
        get_session: SessionProvider,
        batch_size: int = STORE_BATCH_LIMIT,
        search_text_max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        if not 1 <= batch_size <= STORE_BATCH_LIMIT:
            raise ValueError(f"batch_size must be between 1 and {STORE_BATCH_LIMIT}")
        self.get_session = get_session
        self.batch_size = batch_size
        self.mapper = BookMapper(search_text_max_length)

    def find(self, owner_id: OwnerId, query: BookQuery) -> CursorPage[Book]:
        """
        Get one page of an owner's books, ordered by title or by search key.

        A non-blank search term switches ordering to the search key and
        restricts it to keys starting with the normalized term. Results are
        always tie-broken by id, so a cursor position is unambiguous. A
        cursor minted for the other ordering is ignored.

        Args:
            owner_id: Owner whose collection is listed
            query: Page size, optional search term and optional page cursor

        Returns:
            CursorPage with at most ``query.page_size`` books
        """
        db = self.get_session()
        if db is None:
            return CursorPage.empty()

        search_term = (query.search_term or "").strip()
        order_field = CursorField.SEARCH_TEXT if search_term else CursorField.TITLE
        column = self._order_column(order_field)

        stmt = self._scoped(select(BookDocument), owner_id)
        if search_term:
            prefix = normalize_search_text(search_term, self.mapper.search_text_max_length)
            stmt = stmt.where(column >= prefix, column <= prefix + SEARCH_RANGE_END)

        cursor = decode_cursor(query.page_cursor)
        if cursor is not None and cursor.field == order_field:
            stmt = stmt.where(
                or_(
                    column > cursor.value,
                    and_(column == cursor.value, BookDocument.id > cursor.id),
                )
            )

        # One extra row tells us whether another page exists
        stmt = stmt.order_by(column, BookDocument.id).limit(query.page_size + 1)

        with self._store_errors(db, "find"):
            documents = list(db.scalars(stmt).all())

        has_more = len(documents) > query.page_size
        page = documents[: query.page_size]
        items = [self.mapper.to_domain(document) for document in page]

        next_cursor = None
        if has_more and page:
            last = page[-1]
            next_cursor = encode_cursor(order_field, self._order_value(last, order_field), last.id)

        return CursorPage(items=items, next_cursor=next_cursor, has_more=has_more)

    def get(self, owner_id: OwnerId, book_id: BookId) -> Book | None:
        """Find a book by id within the owner's collection."""
        db = self.get_session()
        if db is None:
            return None

        stmt = self._scoped(select(BookDocument), owner_id).where(
            BookDocument.id == book_id.value
        )
        with self._store_errors(db, "get"):
            document = db.execute(stmt).scalar_one_or_none()

        if document is None:
            return None
        return self.mapper.to_domain(document)

    def create(self, owner_id: OwnerId, book: Book) -> None:
        """
        Write a new book document.

        Timestamps are the moment of the write, not the entity's values.
        Writing the same id again replaces the document, so a retried
        creation does not produce a duplicate.
        """
        db = self.get_session()
        if db is None:
            return

        document = self.mapper.to_document(owner_id, book, written_at=now_millis())
        with self._store_errors(db, "create"):
            db.merge(document)
            db.commit()

        logger.info("book_created", owner_id=owner_id.value, book_id=book.id.value)

    def update(self, owner_id: OwnerId, book_id: BookId, changes: BookChanges) -> None:
        """
        Write only the fields present in ``changes``.

        A new title also rewrites the search key. The modification time is
        refreshed whenever something is written; an empty change set issues
        no statement at all.
        """
        db = self.get_session()
        if db is None:
            return

        values: dict[str, object] = {
            name: list(value) if isinstance(value, list) else value
            for name, value in changes.present().items()
        }
        if not values:
            return
        if "title" in values:
            values["search_text"] = self.mapper.search_text(str(values["title"]))
        values["last_modified_at"] = now_millis()

        stmt = (
            self._scoped(update(BookDocument), owner_id)
            .where(BookDocument.id == book_id.value)
            .values(**values)
        )
        with self._store_errors(db, "update"):
            matched = db.execute(stmt).rowcount
            db.commit()

        if matched == 0:
            logger.warning("book_update_missed", owner_id=owner_id.value, book_id=book_id.value)
            return
        logger.info(
            "book_updated",
            owner_id=owner_id.value,
            book_id=book_id.value,
            fields=sorted(values),
        )

    def delete(self, owner_id: OwnerId, book_id: BookId) -> None:
        """Hard delete one book; deleting a missing book is not an error."""
        db = self.get_session()
        if db is None:
            return

        stmt = self._scoped(delete(BookDocument), owner_id).where(
            BookDocument.id == book_id.value
        )
        with self._store_errors(db, "delete"):
            db.execute(stmt)
            db.commit()

        logger.info("book_deleted", owner_id=owner_id.value, book_id=book_id.value)

    def delete_all(self, owner_id: OwnerId) -> None:
        """
        Delete every book of an owner in sequential, committed batches.

        Reads all ids first, then deletes them ``batch_size`` at a time,
        committing each batch before the next one starts. A failure part way
        leaves the first batches deleted and the rest intact; calling again
        deletes whatever remains.
        """
        db = self.get_session()
        if db is None:
            return

        ids_stmt = self._scoped(select(BookDocument.id), owner_id).order_by(BookDocument.id)
        with self._store_errors(db, "delete_all"):
            book_ids = list(db.scalars(ids_stmt).all())

        if not book_ids:
            return

        batch_number = 0
        for start in range(0, len(book_ids), self.batch_size):
            chunk = book_ids[start : start + self.batch_size]
            batch_number += 1
            stmt = self._scoped(delete(BookDocument), owner_id).where(
                BookDocument.id.in_(chunk)
            )
            with self._store_errors(db, "delete_all"):
                db.execute(stmt)
                db.commit()
            logger.info(
                "book_batch_deleted",
                owner_id=owner_id.value,
                batch_number=batch_number,
                batch_size=len(chunk),
            )

        logger.info("books_deleted_for_owner", owner_id=owner_id.value, count=len(book_ids))

    @staticmethod
    def _scoped(stmt: StatementT, owner_id: OwnerId) -> StatementT:
        """Restrict a statement to one owner's collection."""
        return stmt.where(BookDocument.owner_id == owner_id.value)

    @staticmethod
    def _order_column(order_field: CursorField) -> InstrumentedAttribute[Any]:
        if order_field is CursorField.SEARCH_TEXT:
            return BookDocument.search_text
        return BookDocument.title

    @staticmethod
    def _order_value(document: BookDocument, order_field: CursorField) -> str:
        if order_field is CursorField.SEARCH_TEXT:
            return document.search_text or ""
        return document.title or ""

    @contextmanager
    def _store_errors(self, db: Session, operation: str) -> Iterator[None]:
        """Roll back and re-raise store failures as repository errors."""
        try:
            yield
        except _UNREACHABLE_ERRORS as exc:
            db.rollback()
            raise StoreUnavailableError(str(exc), operation=operation) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise BookStoreError(str(exc), operation=operation) from exc
