"""
Inkwell: Open Library Client
=============================

What:  Thin async client for the two Open Library features Book Notes uses:
       - cover_exists():     HEAD probe of a cover image derived from an ISBN
       - search_by_title():  catalog search, normalized to SearchResult rows
How:   One shared httpx.AsyncClient, owned by the app (created in the factory,
       closed on shutdown). Tests inject a client backed by httpx.MockTransport.
Who:   Called by the /api/cover and /api/search routes.

Failure Contract:
    cover_exists()     never raises; every failure collapses to False
    search_by_title()  raises UpstreamError with a fixed message
    Neither call is retried or cached. No timeout unless OPENLIBRARY_TIMEOUT
    is configured.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from inkwell.config import settings
from inkwell.exceptions import UpstreamError
from inkwell.schemas.book import SearchResult

logger = logging.getLogger(__name__)


def cover_url_from_isbn(
    isbn: Optional[str],
    size: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Optional[str]:
    """
    Deterministic cover URL for an ISBN, or None when there is no ISBN.

    Example:
        cover_url_from_isbn("0441013593")
        → "https://covers.openlibrary.org/b/isbn/0441013593-M.jpg"
    """
    if not isbn:
        return None
    base = (base_url or settings.openlibrary_covers_url).rstrip("/")
    return f"{base}/{quote(isbn, safe='')}-{size or settings.openlibrary_cover_size}.jpg"


def _first(values: Any) -> Optional[Any]:
    if isinstance(values, list) and values:
        return values[0]
    return None


class OpenLibraryClient:
    """
    Open Library catalog client.

    Attributes:
        http:        shared httpx.AsyncClient (redirects followed)
        search_url:  search.json endpoint
        covers_url:  base of the covers service
        limit:       maximum matches requested and returned by a search
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        search_url: Optional[str] = None,
        covers_url: Optional[str] = None,
        limit: Optional[int] = None,
    ):
        self.http = http
        self.search_url = search_url or settings.openlibrary_search_url
        self.covers_url = covers_url or settings.openlibrary_covers_url
        self.limit = limit or settings.openlibrary_search_limit

    @classmethod
    def from_settings(cls) -> "OpenLibraryClient":
        http = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.openlibrary_timeout),
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )
        return cls(http)

    def cover_url(self, isbn: Optional[str], size: Optional[str] = None) -> Optional[str]:
        return cover_url_from_isbn(isbn, size=size, base_url=self.covers_url)

    async def cover_exists(self, isbn: str) -> bool:
        """
        Probe the cover image for an ISBN with a HEAD request.

        Returns True only for a 2xx response (after redirects). Network errors
        and error statuses are logged at DEBUG and reported as False.
        """
        url = self.cover_url(isbn)
        if url is None:
            return False
        try:
            response = await self.http.head(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Cover probe failed for %s: %s", isbn, str(e))
            return False
        return True

    async def search_by_title(self, title: str) -> List[SearchResult]:
        """
        Search the catalog by title.

        Raises:
            UpstreamError: transport failure, non-2xx status, a body that
                is not a JSON object, or docs that do not fit SearchResult.
        """
        try:
            response = await self.http.get(
                self.search_url,
                params={"title": title, "limit": self.limit},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Open Library search failed: %s", e.response.status_code)
            raise UpstreamError(status_code=e.response.status_code, context={"title": title})
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Open Library search failed: %s", str(e))
            raise UpstreamError(context={"title": title, "error_type": type(e).__name__})

        if not isinstance(data, dict):
            logger.error("Open Library search returned a non-object body")
            raise UpstreamError(context={"title": title})

        docs = data.get("docs") or []
        if not isinstance(docs, list):
            logger.error("Open Library search returned non-list docs: %s", type(docs).__name__)
            raise UpstreamError(context={"title": title})

        try:
            return [self._to_result(doc) for doc in docs[: self.limit] if isinstance(doc, dict)]
        except (PydanticValidationError, TypeError) as e:
            logger.error("Open Library search returned a malformed doc: %s", str(e))
            raise UpstreamError(context={"title": title, "error_type": type(e).__name__})

    def _to_result(self, doc: Dict[str, Any]) -> SearchResult:
        isbn = _first(doc.get("isbn"))
        return SearchResult(
            title=doc.get("title"),
            author=_first(doc.get("author_name")),
            first_publish_year=doc.get("first_publish_year") or None,
            isbn=isbn,
            cover=self.cover_url(isbn) if isbn else None,
        )

    async def close(self) -> None:
        await self.http.aclose()


def get_catalog_client(request: Request) -> OpenLibraryClient:
    """FastAPI dependency returning the client owned by the running app."""
    return request.app.state.catalog_client
