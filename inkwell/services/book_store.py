"""
Inkwell: Book Store (durable)
==============================

What:  CRUD access to the `books` table through an AsyncSession.
How:   One SQLAlchemy statement per operation; mutations commit immediately.
Who:   Built per request by the `get_book_store` dependency; called by the
       Book Notes routes and the submission layer.

Sort Orders:
    SortKey.RECENCY  created_at DESC
    SortKey.TITLE    title ASC, created_at DESC
    SortKey.RATING   rating DESC NULLS LAST, created_at DESC
    Every order ends with id DESC so rows created in the same instant still
    come out newest first.

Error Handling:
    Any failure from the storage layer is logged and re-raised as
    DatabaseError carrying a generic message. Nothing is retried.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.database import get_db_session
from inkwell.exceptions import DatabaseError
from inkwell.models.book import Book
from inkwell.schemas.book import BookForm

logger = logging.getLogger(__name__)


class SortKey(str, enum.Enum):
    """The closed set of list orders a client may ask for."""

    RECENCY = "recency"
    TITLE = "title"
    RATING = "rating"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Map a raw `?sort=` value to a key; anything unrecognized is RECENCY."""
        try:
            return cls(value)
        except ValueError:
            return cls.RECENCY

    def order_by(self) -> Tuple:
        if self is SortKey.TITLE:
            return (Book.title.asc(), Book.created_at.desc(), Book.id.desc())
        if self is SortKey.RATING:
            return (Book.rating.desc().nulls_last(), Book.created_at.desc(), Book.id.desc())
        return (Book.created_at.desc(), Book.id.desc())


# Largest value the INTEGER primary key can hold on every supported backend
MAX_BOOK_ID = 2**31 - 1


def _parse_id(book_id) -> Optional[int]:
    """
    Path segments are text. Only plain ASCII digits inside the key's range
    can match a row; "+5", " 5", "1_0" and oversized ids are absent.
    """
    text = str(book_id)
    if not (text.isascii() and text.isdigit()):
        return None
    pk = int(text)
    if pk > MAX_BOOK_ID:
        return None
    return pk


class BookStore:
    """
    Book persistence bound to one session.

    Responsibilities:
        - list(): all books in the requested order
        - find(): single book or None
        - create() / update() / delete(): single-statement writes
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, sort: SortKey = SortKey.RECENCY) -> List[Book]:
        try:
            result = await self.db.execute(select(Book).order_by(*sort.order_by()))
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing books: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to load books.",
                context={"sort": sort.value, "error_type": type(e).__name__},
            )

    async def find(self, book_id) -> Optional[Book]:
        pk = _parse_id(book_id)
        if pk is None:
            return None
        try:
            result = await self.db.execute(select(Book).where(Book.id == pk))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching book %s: %s", book_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the book.",
                context={"book_id": str(book_id), "error_type": type(e).__name__},
            )

    async def create(self, form: BookForm) -> Book:
        book = Book(
            title=form.title,
            author=form.author,
            isbn=form.isbn,
            rating=form.rating,
            notes=form.notes,
            date_read=form.date_read,
        )
        try:
            self.db.add(book)
            await self.db.commit()
        except Exception as e:
            logger.error("Error creating book: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to save book.",
                context={"error_type": type(e).__name__},
            )
        logger.info("Book %s created", book.id)
        return book

    async def update(self, book_id, form: BookForm) -> Optional[Book]:
        """Overwrite every editable column. Returns None when the id is absent."""
        book = await self.find(book_id)
        if book is None:
            return None
        try:
            book.title = form.title
            book.author = form.author
            book.isbn = form.isbn
            book.rating = form.rating
            book.notes = form.notes
            book.date_read = form.date_read
            book.updated_at = datetime.now(timezone.utc)
            await self.db.commit()
        except Exception as e:
            logger.error("Error updating book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update book.",
                context={"book_id": str(book_id), "error_type": type(e).__name__},
            )
        logger.info("Book %s updated", book.id)
        return book

    async def delete(self, book_id) -> None:
        """Delete a row if present; deleting an absent id is a no-op."""
        pk = _parse_id(book_id)
        if pk is None:
            return
        try:
            await self.db.execute(delete(Book).where(Book.id == pk))
            await self.db.commit()
        except Exception as e:
            logger.error("Error deleting book %s: %s", book_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete book.",
                context={"book_id": str(book_id), "error_type": type(e).__name__},
            )


def get_book_store(db: AsyncSession = Depends(get_db_session)) -> BookStore:
    """FastAPI dependency: a BookStore over the request's session."""
    return BookStore(db)
