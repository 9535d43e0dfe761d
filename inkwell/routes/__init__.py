# Routes package init
"""
Inkwell: Routes Package
========================

Route Inventory:
    - blog.py:     Blog app HTML routes (/, /posts/...)
    - books.py:    Book Notes HTML routes (/, /books/...)
    - catalog.py:  Book Notes JSON helpers (/api/cover, /api/search)
    - health.py:   Book Notes health check (/health)

Routes stay thin: they read the request, call a store, a submission
function or the Open Library client, and pick the view state.
"""
