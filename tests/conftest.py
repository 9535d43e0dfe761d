"""
Inkwell: Test Configuration (conftest.py)
==========================================

What:  Shared pytest fixtures for the whole suite.
How:   The environment is pointed at in-memory SQLite before any inkwell
       import, so the settings singleton and the module engine never touch
       PostgreSQL.

Fixture Hierarchy (all function-scoped):
    ├── post_store:       fresh PostStore
    ├── blog_client:      httpx AsyncClient over a blog app serving post_store
    ├── db_engine:        fresh in-memory SQLite engine with tables created
    ├── db_session:       AsyncSession on db_engine
    ├── mock_db_session:  AsyncMock session for failure injection
    ├── upstream:         fake Open Library behind httpx.MockTransport
    ├── catalog_client:   OpenLibraryClient talking to `upstream`
    └── books_client:     httpx AsyncClient over a Book Notes app wired to
                          db_engine and catalog_client
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, List, Optional  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from inkwell.database import build_engine, get_db_session, init_models  # noqa: E402
from inkwell.main import create_blog_app, create_books_app  # noqa: E402
from inkwell.services.openlibrary_service import OpenLibraryClient  # noqa: E402
from inkwell.services.post_store import PostStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Fake Open Library
# ══════════════════════════════════════════════════════════════════════════

class FakeOpenLibrary:
    """
    Request handler for httpx.MockTransport imitating Open Library.

    Attributes tests may set:
        docs:           docs returned by search.json
        search_status:  status code for search.json
        cover_status:   status code for cover HEAD probes
        error:          exception raised for every request (network failure)
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.docs: List[Dict[str, Any]] = []
        self.search_status = 200
        self.cover_status = 200
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if request.url.host == "covers.openlibrary.org":
            return httpx.Response(self.cover_status)
        if request.url.path == "/search.json":
            if self.search_status != 200:
                return httpx.Response(self.search_status, text="upstream trouble")
            return httpx.Response(200, json={"numFound": len(self.docs), "docs": self.docs})
        return httpx.Response(404)


# ══════════════════════════════════════════════════════════════════════════
# Blog Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def post_store():
    return PostStore()


@pytest_asyncio.fixture
async def blog_client(post_store):
    """
    HTTPX AsyncClient routed straight into a blog app.

    Redirects are not followed so tests can assert on 303 + Location.
    """
    app = create_blog_app(store=post_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(db_session_factory):
    async with db_session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock async session.

    Usage:
        mock_db_session.execute.side_effect = OSError("connection refused")
        await BookStore(mock_db_session).list()
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Book Notes Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def upstream():
    return FakeOpenLibrary()


@pytest_asyncio.fixture
async def catalog_client(upstream):
    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream), follow_redirects=True)
    client = OpenLibraryClient(http)
    yield client
    await client.close()


@pytest.fixture
def books_app(catalog_client, db_session_factory):
    app = create_books_app(catalog_client=catalog_client)

    async def override_session():
        async with db_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    return app


@pytest_asyncio.fixture
async def books_client(books_app):
    transport = ASGITransport(app=books_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
