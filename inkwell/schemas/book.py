"""
Inkwell: Book Request/Response Schemas
=======================================

What:  Pydantic models for the Book Notes form submission and the JSON
       catalog endpoints.
How:   BookForm coerces raw form text into column values; the response
       models define the `/api/cover`, `/api/search` and `/health` payloads.
"""

import math
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Form Models
# ══════════════════════════════════════════════════════════════════════════


class BookForm(BaseModel):
    """
    What:  A create/edit submission after coercion.

    Coercion rules:
        title      trimmed; "" when missing (rejected later by presence check)
        author     trimmed; blank → None
        isbn       trimmed; blank → None
        notes      trimmed; blank → None
        rating     number text → float; blank or non-numeric → None
        date_read  ISO date text (YYYY-MM-DD) → date; blank or malformed → None
    """
    title: str = ""
    author: Optional[str] = None
    isbn: Optional[str] = None
    rating: Optional[float] = None
    notes: Optional[str] = None
    date_read: Optional[date] = None

    @field_validator("title", mode="before")
    @classmethod
    def trim_title(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("author", "isbn", "notes", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("rating", mode="before")
    @classmethod
    def coerce_rating(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        try:
            number = float(str(v).strip())
        except ValueError:
            return None
        if math.isnan(number) or math.isinf(number):
            return None
        return number

    @field_validator("date_read", mode="before")
    @classmethod
    def coerce_date_read(cls, v: Any) -> Optional[date]:
        if v is None or isinstance(v, date):
            return v
        try:
            return date.fromisoformat(str(v).strip())
        except ValueError:
            return None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "BookForm":
        """Build a form from raw submitted strings, ignoring unknown keys."""
        return cls(**{name: raw.get(name) for name in cls.model_fields})


# ══════════════════════════════════════════════════════════════════════════
# Catalog Response Models
# ══════════════════════════════════════════════════════════════════════════


class SearchResult(BaseModel):
    """
    What:  One normalized Open Library match.
    How:   First author / first ISBN of the upstream doc; cover derived from
           the first ISBN when there is one.
    """
    title: Optional[str] = Field(default=None)
    author: Optional[str] = Field(default=None)
    first_publish_year: Optional[int] = Field(default=None)
    isbn: Optional[str] = Field(default=None)
    cover: Optional[str] = Field(default=None)


class SearchResponse(BaseModel):
    """Returned by GET /api/search."""
    query: str = Field(description="The trimmed title that was searched")
    results: List[SearchResult] = Field(description="At most five normalized matches")


class CoverResponse(BaseModel):
    """Returned by GET /api/cover. `cover` is null when the probe failed."""
    isbn: str
    cover: Optional[str] = None
    exists: bool


class ErrorResponse(BaseModel):
    """JSON error payload for the catalog API."""
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
