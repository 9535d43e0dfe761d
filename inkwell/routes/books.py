"""
Inkwell: Book Notes Route Handlers
===================================

What:  HTML routes of the Book Notes app.
How:   A BookStore is injected per request. Reads raise NotFoundError /
       DatabaseError; create and edit submissions return an outcome from
       services/submissions.py which the handler maps to a response.

Route Inventory:
    GET          /                    list, ?sort=recency|title|rating
    GET          /books/new           create form
    POST         /books               create → 303 /books/{id} | 400 | 500
    GET          /books/{id}          show | 404
    GET          /books/{id}/edit     edit form | 404
    POST, PUT    /books/{id}          update → 303 /books/{id} | 400 | 500 | 404
    POST, DELETE /books/{id}/delete   delete → 303 /
    DELETE       /books/{id}          delete → 303 /

Forms reach PUT and DELETE with POST + ?_method= (middleware/method_override.py).

Storage failures:
    list        → list view, "Failed to load books.", 500
    show/edit   → not-found view, 500
    delete      → list view, "Failed to delete book.", 500
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse

from inkwell.exceptions import DatabaseError, NotFoundError
from inkwell.models.book import Book
from inkwell.services.book_store import BookStore, SortKey, get_book_store
from inkwell.services.openlibrary_service import cover_url_from_isbn
from inkwell.services.submissions import (
    Accepted,
    StoreFailed,
    submit_book_edit,
    submit_new_book,
)
from inkwell.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Books"])

BOOK_FIELDS = ("title", "author", "isbn", "rating", "notes", "date_read")


async def read_book_form(request: Request) -> Dict[str, Any]:
    """The submitted book fields as raw strings; missing fields are omitted."""
    form = await request.form()
    return {name: form[name] for name in BOOK_FIELDS if name in form}


def book_values(book: Book) -> Dict[str, Any]:
    """A stored book as form values, for pre-filling the edit form."""
    return {
        "title": book.title,
        "author": book.author or "",
        "isbn": book.isbn or "",
        "rating": "" if book.rating is None else f"{book.rating:g}",
        "notes": book.notes or "",
        "date_read": book.date_read.isoformat() if book.date_read else "",
    }


async def _load_book(store: BookStore, book_id: str) -> Book:
    book = await store.find(book_id)
    if book is None:
        raise NotFoundError(resource="book", resource_id=book_id)
    return book


def _index(request: Request, books, sort: SortKey, error: Optional[str] = None, status_code: int = 200):
    return render(
        request,
        "books/index.html",
        {
            "page_title": "Book Notes",
            "books": books,
            "sort": sort.value,
            "sort_keys": [key.value for key in SortKey],
            "cover_url": cover_url_from_isbn,
            "error": error,
        },
        status_code=status_code,
    )


def _edit_form(request: Request, book: Book, values, error=None, status_code=200, title=None):
    return render(
        request,
        "books/edit.html",
        {
            "page_title": f"Edit: {title or book.title}",
            "book": book,
            "values": values,
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/")
async def list_books(
    request: Request,
    sort: Optional[str] = Query(default=None),
    store: BookStore = Depends(get_book_store),
):
    sort_key = SortKey.parse(sort)
    try:
        books = await store.list(sort_key)
    except DatabaseError:
        return _index(request, [], sort_key, error="Failed to load books.", status_code=500)
    return _index(request, books, sort_key)


@router.get("/books/new")
async def new_book_form(request: Request):
    return render(request, "books/new.html", {"page_title": "Add a book", "values": {}, "error": None})


@router.post("/books")
async def create_book(request: Request, store: BookStore = Depends(get_book_store)):
    outcome = await submit_new_book(store, await read_book_form(request))
    if isinstance(outcome, Accepted):
        return RedirectResponse(f"/books/{outcome.record.id}", status_code=303)
    return render(
        request,
        "books/new.html",
        {"page_title": "Add a book", "values": outcome.values, "error": outcome.message},
        status_code=500 if isinstance(outcome, StoreFailed) else 400,
    )


@router.get("/books/{book_id}")
async def show_book(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    book = await _load_book(store, book_id)
    return render(
        request,
        "books/show.html",
        {"page_title": book.title, "book": book, "cover": cover_url_from_isbn(book.isbn)},
    )


@router.get("/books/{book_id}/edit")
async def edit_book_form(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    book = await _load_book(store, book_id)
    return _edit_form(request, book, book_values(book))


@router.api_route("/books/{book_id}", methods=["POST", "PUT"])
async def update_book(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    book = await _load_book(store, book_id)
    # A failed commit leaves the rejected values on the instance
    stored_title = book.title
    outcome = await submit_book_edit(store, book_id, await read_book_form(request))
    if isinstance(outcome, Accepted):
        return RedirectResponse(f"/books/{book_id}", status_code=303)
    status_code = 500 if isinstance(outcome, StoreFailed) else 400
    return _edit_form(
        request,
        book,
        outcome.values,
        error=outcome.message,
        status_code=status_code,
        title=stored_title,
    )


@router.api_route("/books/{book_id}/delete", methods=["POST", "DELETE"])
@router.delete("/books/{book_id}")
async def delete_book(book_id: str, request: Request, store: BookStore = Depends(get_book_store)):
    try:
        await store.delete(book_id)
    except DatabaseError:
        return _index(request, [], SortKey.RECENCY, error="Failed to delete book.", status_code=500)
    return RedirectResponse("/", status_code=303)
