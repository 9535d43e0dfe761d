"""
Inkwell: Form Submissions
==========================

What:  The validate → persist step for every create/edit form, returning an
       explicit outcome instead of raising.
How:   Each submit_* function runs the presence check, calls the store once,
       and reports one of three outcomes:

           received ──▶ Accepted      store write done; redirect to show page
                   ├──▶ Rejected      presence check failed; 400, re-render
                   └──▶ StoreFailed   storage layer failed; 500, re-render

Who:   Called by the blog and book route handlers, which branch on the
       outcome type to pick the response.

Edits of an absent record are not an outcome here: handlers resolve the
record first and answer 404 before submitting.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, TypeVar, Union

from inkwell.exceptions import DatabaseError
from inkwell.models.book import Book
from inkwell.schemas.book import BookForm
from inkwell.schemas.post import Post, PostForm
from inkwell.services.book_store import BookStore
from inkwell.services.post_store import PostStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

POST_REQUIRED_MESSAGE = "Title and content are required."
BOOK_REQUIRED_MESSAGE = "Title is required."


@dataclass(frozen=True)
class Accepted(Generic[T]):
    record: T


@dataclass(frozen=True)
class Rejected:
    message: str
    values: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoreFailed:
    message: str
    values: Dict[str, Any] = field(default_factory=dict)


Outcome = Union[Accepted[T], Rejected, StoreFailed]


# ── Posts ─────────────────────────────────────────────────────────────────

def _validate_post(form: PostForm) -> Union[Rejected, tuple]:
    title = form.title.strip()
    content = form.content.strip()
    if not title or not content:
        return Rejected(POST_REQUIRED_MESSAGE, form.model_dump())
    return title, content


def submit_new_post(store: PostStore, form: PostForm) -> Outcome[Post]:
    checked = _validate_post(form)
    if isinstance(checked, Rejected):
        return checked
    title, content = checked
    return Accepted(store.create(title, content))


def submit_post_edit(store: PostStore, post_id: str, form: PostForm) -> Outcome[Post]:
    """Edit an existing post. The caller has already confirmed it exists."""
    checked = _validate_post(form)
    if isinstance(checked, Rejected):
        return checked
    title, content = checked
    return Accepted(store.update(post_id, title, content))


# ── Books ─────────────────────────────────────────────────────────────────

async def submit_new_book(store: BookStore, raw: Dict[str, Any]) -> Outcome[Book]:
    form = BookForm.from_raw(raw)
    if not form.title:
        return Rejected(BOOK_REQUIRED_MESSAGE, raw)
    try:
        book = await store.create(form)
    except DatabaseError as e:
        logger.error("Book create failed: %s | Context: %s", e.message, e.context)
        return StoreFailed("Failed to save book.", raw)
    return Accepted(book)


async def submit_book_edit(store: BookStore, book_id: str, raw: Dict[str, Any]) -> Outcome[Book]:
    """Edit an existing book. The caller has already confirmed it exists."""
    form = BookForm.from_raw(raw)
    if not form.title:
        return Rejected(BOOK_REQUIRED_MESSAGE, raw)
    try:
        book = await store.update(book_id, form)
    except DatabaseError as e:
        logger.error("Book %s update failed: %s | Context: %s", book_id, e.message, e.context)
        return StoreFailed("Failed to update book.", raw)
    return Accepted(book)
