"""
Inkwell: Book SQLAlchemy Model
===============================

What:  ORM model representing the `books` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by BookStore for CRUD operations.

Table Design:
    - id: datastore-assigned integer key, the only uniqueness constraint
      (duplicate ISBNs are allowed)
    - title: the only required field
    - author, isbn, rating, notes, date_read: optional, NULL when absent
    - created_at: set once on insert; drives default ordering
    - updated_at: refreshed by every update
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import Date, DateTime, Float, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """
    A book the reader has logged, with optional rating and notes.

    Lifecycle:
        1. Inserted on a valid create submission
        2. Updated in place on a valid edit (updated_at refreshed)
        3. Deleted on request; no soft-delete, no versioning
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    isbn: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=None)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    date_read: Mapped[Optional[date]] = mapped_column(Date, nullable=True, default=None)

    # ── Timestamps ────────────────────────────────────────────────────────
    # Stored in UTC; conversion to local time happens in the templates
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_books_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
