"""
Inkwell: Request Logging Middleware
====================================

What:  One access-log line per HTTP request on the `inkwell.access` logger.
How:   Times the rest of the stack, then logs verb, path, status, duration
       and, for redirects, where the browser is being sent:

           POST /books 303 → /books/7 4.2ms [3f9a0c1d]
           GET /books/99 404 1.1ms [77d2e0aa]

When:  Runs inside RequestIDMiddleware, so the id is already set.

Level by status class: 5xx ERROR, 4xx WARNING, otherwise INFO.
Form bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from inkwell.middleware.request_id import request_id_var

logger = logging.getLogger("inkwell.access")

QUIET_PATHS = {"/health", "/favicon.ico"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the CRUD routes and the catalog API."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        location = response.headers.get("location")
        target = f" → {location}" if location and 300 <= status < 400 else ""
        rid = request_id_var.get("")

        logger.log(
            level_for_status(status),
            "%s %s %d%s %.1fms [%s]",
            request.method,
            path,
            status,
            target,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
