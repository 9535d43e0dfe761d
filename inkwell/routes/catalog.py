"""
Inkwell: Catalog API Routes
============================

What:  JSON helpers backed by Open Library, used by the Book Notes forms.
How:   Validate the query parameter, then make exactly one upstream call.

Route Inventory:
    GET /api/cover?isbn=    {isbn, cover, exists}
    GET /api/search?title=  {query, results[]}

Errors (JSON `{"error": ...}`, rendered by the global handlers):
    400  parameter missing or blank, no upstream call made
    502  search upstream failed
"""

import logging

from fastapi import APIRouter, Depends, Query

from inkwell.exceptions import ValidationError
from inkwell.schemas.book import CoverResponse, ErrorResponse, SearchResponse
from inkwell.services.openlibrary_service import OpenLibraryClient, get_catalog_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get(
    "/cover",
    response_model=CoverResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Check whether Open Library has a cover for an ISBN",
)
async def check_cover(
    isbn: str = Query(default=""),
    client: OpenLibraryClient = Depends(get_catalog_client),
) -> CoverResponse:
    isbn = isbn.strip()
    if not isbn:
        raise ValidationError(message="Provide ?isbn=", field="isbn")

    if await client.cover_exists(isbn):
        return CoverResponse(isbn=isbn, cover=client.cover_url(isbn), exists=True)
    return CoverResponse(isbn=isbn, cover=None, exists=False)


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Search Open Library by title",
)
async def search_catalog(
    title: str = Query(default=""),
    client: OpenLibraryClient = Depends(get_catalog_client),
) -> SearchResponse:
    title = title.strip()
    if not title:
        raise ValidationError(message="Provide ?title=", field="title")

    results = await client.search_by_title(title)
    logger.info("Open Library search for %r returned %d results", title, len(results))
    return SearchResponse(query=title, results=results)
