"""
Inkwell: Health Check Route
============================

What:  GET /health on the Book Notes app.
How:   Runs `SELECT 1` against the configured database.

Status levels:
    healthy    database reachable (HTTP 200)
    unhealthy  database unreachable (HTTP 503)
"""

import logging

from fastapi import APIRouter, Response
from sqlalchemy import text

from inkwell import __version__
from inkwell import database
from inkwell.schemas.book import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(status=overall, version=__version__, database=db_status)
