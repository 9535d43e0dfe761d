"""
Inkwell: Custom Exception Hierarchy
====================================

What:  Application-specific exceptions for the error taxonomy of both apps.
How:   Each exception carries a user-safe message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into a
       rendered view or a JSON `{"error": ...}` payload.
Who:   Raised by services and routes; caught by global handlers or by the
       submission layer (services/submissions.py).

Exception Hierarchy:
    InkwellError (base)
    ├── ValidationError   → 400 Bad Request (missing query parameter)
    ├── NotFoundError     → 404 Not Found (absent id, routing miss)
    ├── DatabaseError     → 500 Internal Server Error
    └── UpstreamError     → 502 Bad Gateway (Open Library failure)

Form submissions never surface ValidationError: presence checks there are
reported as a `Rejected` outcome, and a DatabaseError raised during a write
is folded into a `StoreFailed` outcome.
"""

from typing import Any, Dict, Optional


class InkwellError(Exception):
    """
    Base exception for all Inkwell application errors.

    Attributes:
        message:  User-facing error description (safe to return to clients)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InkwellError):
    """
    Raised when a required request parameter is missing or blank.

    HTTP:    400 Bad Request

    Example response:
        {"error": "Provide ?isbn="}
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(InkwellError):
    """
    Raised when a requested record does not exist.

    When:    Show or edit-form request for an id that is not in the store.
    HTTP:    404 Not Found (rendered with the app's not-found view)
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(InkwellError):
    """
    Raised when a datastore operation fails.

    When:    Connection lost, query failure, constraint violation.
    HTTP:    500 Internal Server Error

    The message is always generic. Detail (exception type, ids) lives in
    `context` and is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(InkwellError):
    """
    Raised when the Open Library catalog cannot be queried.

    When:    Network error, non-success status, or undecodable body.
    HTTP:    502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "Failed to fetch from Open Library",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
