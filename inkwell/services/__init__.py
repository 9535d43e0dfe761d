# Services package init
"""
Inkwell: Services Layer
========================

What:  Persistence, validation and upstream access, independent of HTTP.

Service Inventory:
    - PostStore:          volatile, process-local blog post collection
    - BookStore:          book rows behind an AsyncSession, closed sort set
    - submissions:        validate → persist, returning an explicit outcome
    - OpenLibraryClient:  cover probe and title search against Open Library
"""
