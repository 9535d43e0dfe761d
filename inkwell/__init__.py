"""
Inkwell: Application Package
=============================

What:  Two small server-rendered CRUD applications sharing one layered layout.
       - Blog:       posts kept in a process-local store
       - Book Notes: books kept in a SQL table, plus an Open Library proxy
How:   Each app is assembled by a factory in `inkwell.main`.

Architecture Note:
    ┌─────────────────────────────────────┐
    │       Routes (HTML + JSON)          │  ← HTTP concerns, view selection
    ├─────────────────────────────────────┤
    │   Services (submissions, stores,    │  ← validation, persistence,
    │   Open Library client)              │    upstream calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
