"""
Inkwell: Request ID Middleware
===============================

What:  Assigns a short correlation id to each request and echoes it back in
       the X-Request-ID response header.
How:   A well-formed client-sent X-Request-ID is reused; anything else is
       replaced by 8 hex characters. The id lives in a ContextVar read by the
       access log and the exception handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_CLIENT_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to every request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        sent = request.headers.get("X-Request-ID", "")
        rid = sent if _CLIENT_ID.match(sent) else new_request_id()

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
