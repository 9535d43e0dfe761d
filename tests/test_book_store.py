"""
Inkwell: Book Store Tests
==========================

What:  Tests for BookStore CRUD, list ordering and storage-failure mapping.
How:   CRUD and ordering run against in-memory SQLite (db_session);
       failure paths use the mock session from conftest.

What we test:
    ✅ create/find/update/delete round trip
    ✅ recency, title and rating orders (unrated last, newest-created ties)
    ✅ Unknown sort keys fall back to recency
    ✅ Non-numeric and absent ids
    ✅ Storage failures surface as DatabaseError with a generic message
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from inkwell.exceptions import DatabaseError
from inkwell.models.book import Book
from inkwell.schemas.book import BookForm
from inkwell.services.book_store import MAX_BOOK_ID, BookStore, SortKey, _parse_id

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


async def _seed(session, rows):
    """Insert (title, rating, minutes-after-BASE_TIME) rows with explicit created_at."""
    books = []
    for title, rating, minutes in rows:
        stamp = BASE_TIME + timedelta(minutes=minutes)
        book = Book(title=title, rating=rating, created_at=stamp, updated_at=stamp)
        session.add(book)
        books.append(book)
    await session.commit()
    return books


class TestSortKey:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("recency", SortKey.RECENCY),
            ("title", SortKey.TITLE),
            ("rating", SortKey.RATING),
            (None, SortKey.RECENCY),
            ("", SortKey.RECENCY),
            ("TITLE", SortKey.RECENCY),
            ("rating; DROP TABLE books", SortKey.RECENCY),
        ],
    )
    def test_parse(self, raw, expected):
        assert SortKey.parse(raw) is expected


class TestParseId:

    @pytest.mark.parametrize("raw, expected", [("1", 1), ("007", 7), (str(MAX_BOOK_ID), MAX_BOOK_ID)])
    def test_plain_digits(self, raw, expected):
        assert _parse_id(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "abc", "+5", "-5", " 5", "5 ", "1_0", "1.0", "\u0665", str(MAX_BOOK_ID + 1), "99999999999999999999"],
    )
    def test_not_a_row_key(self, raw):
        assert _parse_id(raw) is None


class TestBookStoreCrud:

    @pytest.mark.asyncio
    async def test_create_and_find(self, db_session):
        store = BookStore(db_session)
        book = await store.create(
            BookForm.from_raw({"title": "  Dune ", "author": "Frank Herbert", "rating": "9"})
        )

        assert book.id is not None
        found = await store.find(str(book.id))
        assert found.title == "Dune"
        assert found.author == "Frank Herbert"
        assert found.rating == 9.0
        assert found.isbn is None
        assert found.notes is None
        assert found.date_read is None

    @pytest.mark.asyncio
    async def test_duplicate_isbn_allowed(self, db_session):
        store = BookStore(db_session)
        await store.create(BookForm(title="Dune", isbn="0441013593"))
        await store.create(BookForm(title="Dune (reprint)", isbn="0441013593"))
        assert len(await store.list()) == 2

    @pytest.mark.asyncio
    async def test_update_overwrites_fields(self, db_session):
        store = BookStore(db_session)
        book = await store.create(BookForm(title="Dune", author="F. Herbert", rating=7))

        updated = await store.update(
            str(book.id),
            BookForm.from_raw({"title": "Dune", "rating": "", "date_read": "2024-03-01"}),
        )

        assert updated.id == book.id
        assert updated.author is None
        assert updated.rating is None
        assert updated.date_read == date(2024, 3, 1)

    @pytest.mark.asyncio
    async def test_update_absent_returns_none(self, db_session):
        store = BookStore(db_session)
        assert await store.update("999", BookForm(title="Ghost")) is None
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_find_non_numeric_id(self, db_session):
        store = BookStore(db_session)
        assert await store.find("abc") is None

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, db_session):
        store = BookStore(db_session)
        book = await store.create(BookForm(title="Dune"))

        await store.delete(str(book.id))
        await store.delete(str(book.id))
        await store.delete("not-a-number")

        assert await store.find(str(book.id)) is None


class TestBookStoreOrdering:

    @pytest.mark.asyncio
    async def test_recency_newest_first(self, db_session):
        await _seed(db_session, [("A", None, 0), ("B", None, 10), ("C", None, 5)])
        books = await BookStore(db_session).list(SortKey.RECENCY)
        assert [b.title for b in books] == ["B", "C", "A"]

    @pytest.mark.asyncio
    async def test_title_ascending_with_recency_tiebreak(self, db_session):
        await _seed(
            db_session,
            [("Emma", None, 0), ("Dune", None, 1), ("Dune", None, 2), ("Anathem", None, 3)],
        )
        books = await BookStore(db_session).list(SortKey.TITLE)

        assert [b.title for b in books] == ["Anathem", "Dune", "Dune", "Emma"]
        dunes = [b for b in books if b.title == "Dune"]
        assert dunes[0].id > dunes[1].id

    @pytest.mark.asyncio
    async def test_rating_unrated_last(self, db_session):
        await _seed(
            db_session,
            [
                ("unrated-old", None, 0),
                ("five", 5.0, 1),
                ("nine-old", 9.0, 2),
                ("unrated-new", None, 3),
                ("nine-new", 9.0, 4),
            ],
        )
        books = await BookStore(db_session).list(SortKey.RATING)

        assert [b.title for b in books] == [
            "nine-new",
            "nine-old",
            "five",
            "unrated-new",
            "unrated-old",
        ]

    @pytest.mark.asyncio
    async def test_same_instant_newest_id_first(self, db_session):
        await _seed(db_session, [("first", None, 0), ("second", None, 0)])
        books = await BookStore(db_session).list()
        assert [b.title for b in books] == ["second", "first"]


class TestBookStoreFailures:

    @pytest.mark.asyncio
    async def test_list_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OSError("connection refused")

        with pytest.raises(DatabaseError) as exc_info:
            await BookStore(mock_db_session).list(SortKey.TITLE)

        assert exc_info.value.message == "Failed to load books."
        assert exc_info.value.context["error_type"] == "OSError"
        assert "connection refused" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_find_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OSError("boom")

        with pytest.raises(DatabaseError) as exc_info:
            await BookStore(mock_db_session).find("1")

        assert exc_info.value.context["book_id"] == "1"

    @pytest.mark.asyncio
    async def test_create_failure(self, mock_db_session):
        mock_db_session.commit.side_effect = OSError("disk full")

        with pytest.raises(DatabaseError) as exc_info:
            await BookStore(mock_db_session).create(BookForm(title="Dune"))

        assert exc_info.value.message == "Failed to save book."
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_delete_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = OSError("boom")

        with pytest.raises(DatabaseError) as exc_info:
            await BookStore(mock_db_session).delete("3")

        assert exc_info.value.message == "Failed to delete book."
        mock_db_session.commit.assert_not_awaited()
