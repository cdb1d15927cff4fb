"""
Blog Backend: Application Package
==================================

What: The `blog_app` package, a small JSON API for blog posts and their authors.
Who:  Imported by uvicorn (`blog_app.main:app`), Alembic, pytest and the seed command.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Persistence Gateway) │  ← the only code issuing queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Handle)            │  ← engine + session factory
    └─────────────────────────────────────┘

    Routes validate input, delegate to the gateway and map typed errors to
    HTTP responses. The gateway receives a session per request and never
    touches HTTP objects.
"""

__version__ = "1.0.0"
