"""Tests for the SQLAlchemy book repository."""

import base64
from unittest.mock import patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from structlog.testing import capture_logs

from bookshelf.application.common.pagination import CursorField, encode_cursor
from bookshelf.application.library.protocols.book_repository import BookChanges, BookQuery
from bookshelf.domain.common.value_objects import BookId, OwnerId
from bookshelf.domain.library.entities.book import Book
from bookshelf.exceptions import BookStoreError, StoreUnavailableError
from bookshelf.infrastructure.library.repositories import BookRepository
from bookshelf.models import BookDocument

OWNER = OwnerId("owner-1")
OTHER_OWNER = OwnerId("owner-2")


def _book(title: str, book_id: str | None = None, owner: OwnerId = OWNER) -> Book:
    return Book.create(
        owner_id=owner,
        title=title,
        description=f"About {title}",
        authors=["Anon"],
        book_id=BookId(book_id) if book_id else None,
    )


def _seed(repository: BookRepository, *titles: str, owner: OwnerId = OWNER) -> list[Book]:
    books = [_book(title, owner=owner) for title in titles]
    for book in books:
        repository.create(owner, book)
    return books


def _all_pages(repository: BookRepository, query: BookQuery) -> list[list[Book]]:
    pages = []
    page = repository.find(OWNER, query)
    pages.append(page.items)
    while page.has_more:
        page = repository.find(
            OWNER,
            BookQuery(
                page_size=query.page_size,
                search_term=query.search_term,
                page_cursor=page.next_cursor,
            ),
        )
        pages.append(page.items)
    return pages


class TestFind:
    def test_pages_cover_every_book_exactly_once(self, book_repository: BookRepository) -> None:
        books = _seed(book_repository, "Emma", "Dune", "Dune", "Atlas", "Dune", "Beloved", "Carrie")

        pages = _all_pages(book_repository, BookQuery(page_size=3))

        assert [len(items) for items in pages] == [3, 3, 1]
        listed = [book for items in pages for book in items]
        assert [book.id for book in listed] == [
            book.id for book in sorted(books, key=lambda b: (b.title, b.id.value))
        ]

    def test_last_page_has_no_cursor(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "A", "B", "C")

        page = book_repository.find(OWNER, BookQuery(page_size=3))

        assert len(page.items) == 3
        assert page.has_more is False
        assert page.next_cursor is None

    def test_more_books_than_page_size_yields_cursor(
        self, book_repository: BookRepository
    ) -> None:
        _seed(book_repository, "A", "B", "C", "D")

        page = book_repository.find(OWNER, BookQuery(page_size=3))

        assert [book.title for book in page.items] == ["A", "B", "C"]
        assert page.has_more is True
        assert page.next_cursor is not None

    def test_empty_collection(self, book_repository: BookRepository) -> None:
        page = book_repository.find(OWNER, BookQuery(page_size=10))
        assert page.items == []
        assert page.has_more is False

    def test_search_is_a_normalized_prefix_match(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "food", "Bar", "Foobar", "FOO", "afoo")

        page = book_repository.find(OWNER, BookQuery(page_size=10, search_term="  Foo "))

        assert [book.title for book in page.items] == ["FOO", "Foobar", "food"]

    def test_search_ignores_diacritics(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "Élan vital", "Elapsed", "Other")

        page = book_repository.find(OWNER, BookQuery(page_size=10, search_term="ÉLA"))

        assert [book.title for book in page.items] == ["Élan vital", "Elapsed"]

    def test_search_pages_cover_every_match(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "Saga", "Sagan", "saga", "Sage", "Zed", "Salt")

        pages = _all_pages(book_repository, BookQuery(page_size=2, search_term="sag"))

        titles = [book.title for items in pages for book in items]
        assert sorted(titles) == ["Saga", "Sagan", "Sage", "saga"]
        assert len(pages) == 2

    def test_cursor_for_other_ordering_is_ignored(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "Alpha", "Beta")
        stale = encode_cursor(CursorField.TITLE, "Alpha", "zzz")

        page = book_repository.find(
            OWNER, BookQuery(page_size=10, search_term="a", page_cursor=stale)
        )

        assert [book.title for book in page.items] == ["Alpha"]

    def test_garbage_cursor_starts_from_beginning(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "Alpha", "Beta")

        page = book_repository.find(OWNER, BookQuery(page_size=10, page_cursor="%%%"))

        assert [book.title for book in page.items] == ["Alpha", "Beta"]

    def test_deeply_nested_cursor_starts_from_beginning(
        self, book_repository: BookRepository
    ) -> None:
        _seed(book_repository, "Alpha", "Beta")
        nested = base64.urlsafe_b64encode(b"[" * 5000).rstrip(b"=").decode("ascii")

        page = book_repository.find(OWNER, BookQuery(page_size=10, page_cursor=nested))

        assert [book.title for book in page.items] == ["Alpha", "Beta"]

    def test_only_lists_own_books(self, book_repository: BookRepository) -> None:
        _seed(book_repository, "Mine")
        _seed(book_repository, "Theirs", owner=OTHER_OWNER)

        page = book_repository.find(OWNER, BookQuery(page_size=10))

        assert [book.title for book in page.items] == ["Mine"]

    def test_store_outage_is_raised_as_unavailable(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        outage = OperationalError("SELECT", {}, Exception("unable to open database file"))
        with (
            patch.object(db_session, "scalars", side_effect=outage),
            pytest.raises(StoreUnavailableError) as excinfo,
        ):
            book_repository.find(OWNER, BookQuery(page_size=10))

        assert excinfo.value.operation == "find"
        assert excinfo.value.__cause__ is outage


class TestGetAndCreate:
    def test_created_book_can_be_read_back(self, book_repository: BookRepository) -> None:
        book = _book("Dune")
        book.genres.append("sf")
        book_repository.create(OWNER, book)

        stored = book_repository.get(OWNER, book.id)

        assert stored is not None
        assert stored.id == book.id
        assert stored.title == "Dune"
        assert stored.genres == ["sf"]
        assert stored.owner_id == OWNER

    def test_missing_book_is_none(self, book_repository: BookRepository) -> None:
        assert book_repository.get(OWNER, BookId("missing")) is None

    def test_timestamps_are_the_write_time(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        book = Book.create_with_id(
            id=BookId("b-1"),
            owner_id=OWNER,
            title="Old",
            description="d",
            authors=["a"],
            genres=[],
            links=[],
            created_at=1,
            last_modified_at=1,
        )
        book_repository.create(OWNER, book)

        document = db_session.get(BookDocument, {"owner_id": OWNER.value, "id": "b-1"})
        assert document is not None
        assert document.created_at > 1
        assert document.created_at == document.last_modified_at
        assert document.search_text == "old"

    def test_retried_create_does_not_duplicate(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        book = _book("Dune", "b-1")
        book_repository.create(OWNER, book)
        book_repository.create(OWNER, book)

        count = len(db_session.scalars(select(BookDocument.id)).all())
        assert count == 1

    def test_retried_create_restamps_creation_time(self, book_repository: BookRepository) -> None:
        book = _book("Dune", "b-1")
        book_repository.create(OWNER, book)
        first = book_repository.get(OWNER, book.id)
        book_repository.create(OWNER, book)
        retried = book_repository.get(OWNER, book.id)

        assert first is not None and retried is not None
        assert retried.created_at >= first.created_at
        assert retried.created_at == retried.last_modified_at

    def test_blank_title_gets_non_blank_search_key(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        book = _book("   ", "b-1")
        book_repository.create(OWNER, book)

        document = db_session.get(BookDocument, {"owner_id": OWNER.value, "id": "b-1"})
        assert document is not None
        assert document.search_text == " "

    def test_same_id_under_two_owners(self, book_repository: BookRepository) -> None:
        book_repository.create(OWNER, _book("Mine", "shared"))
        book_repository.create(OTHER_OWNER, _book("Theirs", "shared", owner=OTHER_OWNER))

        mine = book_repository.get(OWNER, BookId("shared"))
        theirs = book_repository.get(OTHER_OWNER, BookId("shared"))

        assert mine is not None and mine.title == "Mine"
        assert theirs is not None and theirs.title == "Theirs"

    def test_create_logs_event(self, book_repository: BookRepository) -> None:
        book = _book("Dune", "b-1")
        with capture_logs() as logs:
            book_repository.create(OWNER, book)

        assert {"event": "book_created", "owner_id": "owner-1", "book_id": "b-1"}.items() <= (
            logs[-1].items()
        )

    def test_store_rejection_is_raised_as_store_error(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        rejection = IntegrityError("INSERT", {}, Exception("constraint failed"))
        with (
            patch.object(db_session, "commit", side_effect=rejection),
            pytest.raises(BookStoreError) as excinfo,
        ):
            book_repository.create(OWNER, _book("Dune"))

        assert not isinstance(excinfo.value, StoreUnavailableError)
        assert excinfo.value.operation == "create"


class TestUpdate:
    def test_writes_only_supplied_fields(self, book_repository: BookRepository) -> None:
        book = _book("Dune", "b-1")
        book_repository.create(OWNER, book)
        before = book_repository.get(OWNER, book.id)
        assert before is not None

        book_repository.update(OWNER, book.id, BookChanges(description="New blurb"))

        after = book_repository.get(OWNER, book.id)
        assert after is not None
        assert after.description == "New blurb"
        assert after.title == "Dune"
        assert after.authors == ["Anon"]
        assert after.created_at == before.created_at
        assert after.last_modified_at >= before.last_modified_at

    def test_new_title_rewrites_search_key(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        book_repository.create(OWNER, _book("Dune", "b-1"))

        book_repository.update(OWNER, BookId("b-1"), BookChanges(title="Ørbit"))

        page = book_repository.find(OWNER, BookQuery(page_size=10, search_term="ørb"))
        assert [found.title for found in page.items] == ["Ørbit"]
        document = db_session.get(BookDocument, {"owner_id": OWNER.value, "id": "b-1"})
        assert document is not None
        assert document.search_text == "ørbit"

    def test_empty_changes_write_nothing(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        book_repository.create(OWNER, _book("Dune", "b-1"))

        with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
            book_repository.update(OWNER, BookId("b-1"), BookChanges())

        commit.assert_not_called()

    def test_missing_book_is_logged_not_raised(self, book_repository: BookRepository) -> None:
        with capture_logs() as logs:
            book_repository.update(OWNER, BookId("missing"), BookChanges(title="X"))

        assert [entry["event"] for entry in logs] == ["book_update_missed"]

    def test_cannot_update_another_owners_book(self, book_repository: BookRepository) -> None:
        book_repository.create(OTHER_OWNER, _book("Theirs", "b-1", owner=OTHER_OWNER))

        book_repository.update(OWNER, BookId("b-1"), BookChanges(title="Hijacked"))

        theirs = book_repository.get(OTHER_OWNER, BookId("b-1"))
        assert theirs is not None
        assert theirs.title == "Theirs"


class TestDelete:
    def test_delete_removes_book(self, book_repository: BookRepository) -> None:
        book_repository.create(OWNER, _book("Dune", "b-1"))

        book_repository.delete(OWNER, BookId("b-1"))

        assert book_repository.get(OWNER, BookId("b-1")) is None

    def test_delete_missing_book_is_not_an_error(self, book_repository: BookRepository) -> None:
        book_repository.delete(OWNER, BookId("missing"))

    def test_delete_leaves_other_owners_book_with_same_id(
        self, book_repository: BookRepository
    ) -> None:
        book_repository.create(OWNER, _book("Mine", "shared"))
        book_repository.create(OTHER_OWNER, _book("Theirs", "shared", owner=OTHER_OWNER))

        book_repository.delete(OWNER, BookId("shared"))

        assert book_repository.get(OWNER, BookId("shared")) is None
        theirs = book_repository.get(OTHER_OWNER, BookId("shared"))
        assert theirs is not None
        assert theirs.title == "Theirs"

    def test_delete_all_commits_in_batches(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        db_session.add_all(
            BookDocument(
                owner_id=OWNER.value,
                id=f"b-{index:04d}",
                title=f"Title {index}",
                description="d",
                authors=["a"],
                created_by=OWNER.value,
            )
            for index in range(501)
        )
        db_session.commit()
        book_repository.create(OTHER_OWNER, _book("Theirs", "b-0000", owner=OTHER_OWNER))

        with (
            patch.object(db_session, "commit", wraps=db_session.commit) as commit,
            capture_logs() as logs,
        ):
            book_repository.delete_all(OWNER)

        assert commit.call_count == 2
        batches = [entry for entry in logs if entry["event"] == "book_batch_deleted"]
        assert [entry["batch_size"] for entry in batches] == [500, 1]
        assert [entry["batch_number"] for entry in batches] == [1, 2]
        assert logs[-1]["event"] == "books_deleted_for_owner"
        assert logs[-1]["count"] == 501
        assert book_repository.find(OWNER, BookQuery(page_size=10)).items == []
        assert book_repository.get(OTHER_OWNER, BookId("b-0000")) is not None

    def test_delete_all_respects_batch_size(self, db_session: Session) -> None:
        repository = BookRepository(lambda: db_session, batch_size=2)
        _seed(repository, "A", "B", "C", "D", "E")

        with capture_logs() as logs:
            repository.delete_all(OWNER)

        batches = [entry["batch_size"] for entry in logs if entry["event"] == "book_batch_deleted"]
        assert batches == [2, 2, 1]

    def test_delete_all_on_empty_collection_writes_nothing(
        self, book_repository: BookRepository, db_session: Session
    ) -> None:
        with patch.object(db_session, "commit", wraps=db_session.commit) as commit:
            book_repository.delete_all(OWNER)

        commit.assert_not_called()


class TestUnavailableStore:
    def test_reads_are_empty(self, unavailable_book_repository: BookRepository) -> None:
        page = unavailable_book_repository.find(OWNER, BookQuery(page_size=10))

        assert page.items == []
        assert page.has_more is False
        assert unavailable_book_repository.get(OWNER, BookId("b-1")) is None

    def test_writes_are_skipped(self, unavailable_book_repository: BookRepository) -> None:
        book = _book("Dune")

        unavailable_book_repository.create(OWNER, book)
        unavailable_book_repository.update(OWNER, book.id, BookChanges(title="X"))
        unavailable_book_repository.delete(OWNER, book.id)
        unavailable_book_repository.delete_all(OWNER)


class TestConstruction:
    @pytest.mark.parametrize("batch_size", [0, 501])
    def test_rejects_batch_size_out_of_range(self, batch_size: int) -> None:
        with pytest.raises(ValueError):
            BookRepository(lambda: None, batch_size=batch_size)
