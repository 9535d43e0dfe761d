# Middleware package init
"""
Inkwell: Middleware Package
============================

What:  Cross-cutting concerns applied to every request of both apps.

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access-log line carries the id.
    Book Notes adds [Method Override] innermost, turning a form POST with
    `?_method=PUT|DELETE` into that verb before routing.
"""
