"""
Inkwell: FastAPI Application Factories
=======================================

What:  Builds the two deployable apps.
       - create_blog_app():   Blog manager over a volatile PostStore
       - create_books_app():  Book Notes manager over the `books` table,
                              plus the Open Library JSON helpers
How:   Each factory wires middleware, exception handlers, routers and the
       objects the handlers depend on (store, catalog client) onto app.state.
Who:   uvicorn (`uvicorn inkwell.main:books_app`) and the test suite, which
       calls the factories with its own store / client.

Application Layout (Book Notes):
    ┌─────────────────────────────────────────────────────┐
    │  Middleware:  Request ID → Access log → _method     │
    │                                                     │
    │  Routes:  /  /books/...  /api/cover  /api/search    │
    │           /health                                   │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError → 400 JSON                       │
    │    NotFoundError / routing miss → 404 view          │
    │    DatabaseError → 500 view                         │
    │    UpstreamError → 502 JSON                         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, log the listen address
    Shutdown:  close the Open Library client, dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell import __version__
from inkwell.config import settings
from inkwell.database import dispose_engine
from inkwell.exceptions import (
    DatabaseError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from inkwell.middleware.logging import RequestLoggingMiddleware
from inkwell.middleware.method_override import MethodOverrideMiddleware
from inkwell.middleware.request_id import RequestIDMiddleware, request_id_var
from inkwell.routes import blog, books, catalog, health
from inkwell.services.openlibrary_service import OpenLibraryClient
from inkwell.services.post_store import PostStore
from inkwell.views import render

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once per process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespans
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def blog_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Blog listening on http://%s:%d", settings.backend_host, settings.backend_port)
    yield
    logger.info("Blog shut down (%d posts discarded)", len(app.state.post_store))


@asynccontextmanager
async def books_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Book Notes listening on http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Book Notes shutting down...")
    await app.state.catalog_client.close()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the error taxonomy onto responses.

    Handler table:
        ValidationError                  → 400 {"error": message}
        NotFoundError                    → 404 not-found view
        404 / 405 from routing           → 404 not-found view
        DatabaseError                    → 500 not-found view (generic)
        UpstreamError                    → 502 {"error": message}
        Exception (fallback)             → 500 {"error": generic message}

    Internal detail (exception context, stack traces) is logged only.
    """

    def not_found_view(request: Request, resource_id: Optional[str] = None, status_code: int = 404):
        return render(
            request,
            "notfound.html",
            {"page_title": "Not Found", "id": resource_id},
            status_code=status_code,
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return not_found_view(request, exc.resource_id)

    @app.exception_handler(StarletteHTTPException)
    async def handle_routing_miss(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return not_found_view(request)
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return not_found_view(request, exc.context.get("book_id"), status_code=500)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error(
            "[%s] Upstream error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=502, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred. Please try again."},
        )


def _add_middleware(app: FastAPI) -> None:
    # Last added runs first: RequestID wraps the access log
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)


# ══════════════════════════════════════════════════════════════════════════
# Application Factories
# ══════════════════════════════════════════════════════════════════════════

def create_blog_app(store: Optional[PostStore] = None) -> FastAPI:
    """
    Build the Blog app.

    Args:
        store: PostStore to serve; a fresh empty one when omitted.
    """
    app = FastAPI(
        title="Inkwell Blog",
        version=__version__,
        lifespan=blog_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.display_name = "My Blog"
    app.state.post_store = store if store is not None else PostStore()

    _add_middleware(app)
    register_exception_handlers(app)
    app.include_router(blog.router)
    return app


def create_books_app(catalog_client: Optional[OpenLibraryClient] = None) -> FastAPI:
    """
    Build the Book Notes app.

    Args:
        catalog_client: Open Library client to use; one built from settings
            when omitted. The app closes it on shutdown.
    """
    app = FastAPI(
        title="Inkwell Book Notes",
        description="Reading log with Open Library cover and title lookup.",
        version=__version__,
        lifespan=books_lifespan,
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.display_name = "Book Notes"
    app.state.catalog_client = catalog_client or OpenLibraryClient.from_settings()

    # HTML forms reach PUT / DELETE through ?_method=
    app.add_middleware(MethodOverrideMiddleware)
    _add_middleware(app)
    register_exception_handlers(app)
    app.include_router(books.router)
    app.include_router(catalog.router)
    app.include_router(health.router)
    return app


# ── Application Instances ────────────────────────────────────────────────
# uvicorn inkwell.main:blog_app / uvicorn inkwell.main:books_app
blog_app = create_blog_app()
books_app = create_books_app()
