"""
Inkwell: Method Override Middleware
====================================

What:  Lets HTML forms, which can only send GET and POST, reach the PUT and
       DELETE routes of the Book Notes app.
How:   A POST carrying `?_method=PUT` (or DELETE, PATCH) has its method
       rewritten in the ASGI scope before routing:

           POST /books/7?_method=DELETE  →  DELETE /books/7?_method=DELETE

       Any other method, or an unknown `_method` value, passes through as is.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

OVERRIDE_PARAM = "_method"
OVERRIDABLE_METHODS = {"PUT", "DELETE", "PATCH"}


class MethodOverrideMiddleware(BaseHTTPMiddleware):
    """Rewrite POST to the verb named by the `_method` query parameter."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "POST":
            wanted = request.query_params.get(OVERRIDE_PARAM, "").strip().upper()
            if wanted in OVERRIDABLE_METHODS:
                request.scope["method"] = wanted
        return await call_next(request)
