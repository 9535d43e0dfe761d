"""
Inkwell: Database Session Management
=====================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   Creates an async engine from settings, provides a session dependency
       that rolls back on error and always closes the session.
Who:   Used by the Book Notes route handlers via FastAPI's dependency injection.
When:  Engine is created at module import; sessions are created per-request.

Transactions:
    Every store mutation is a single statement committed by the store itself
    (see services/book_store.py). The dependency only guarantees cleanup.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from inkwell.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Server databases get a sized connection pool. SQLite (tests, local
    experiments) shares one connection through StaticPool so that an
    in-memory database survives across sessions.
    """
    echo = settings.log_level == "DEBUG"
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=echo,
        )
    return create_async_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


# ── Engine & Session Factory ──────────────────────────────────────────────
engine = build_engine(settings.database_url)

# expire_on_commit=False: rows stay readable after the store commits
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On error: rolls back anything left uncommitted
        4. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/")
        async def list_books(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models(target: AsyncEngine = engine) -> None:
    """
    Create all tables known to `Base.metadata` if they do not exist.

    Production schemas are managed by Alembic; this is for tests and
    throwaway SQLite databases.
    """
    # Registers Book with Base.metadata
    from inkwell.models import book  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close all pooled connections. Called during application shutdown."""
    await engine.dispose()
