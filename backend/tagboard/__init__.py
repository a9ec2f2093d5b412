"""
Tagboard Backend - Application Package
=======================================

What: Relational JSON API over messages/tags (many-to-many) and
      grads/offers (one-to-many).
Who:  Imported by uvicorn (`tagboard.main:app`), Alembic, and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Queries, row aggregation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    List endpoints fetch flat join rows and hand them to
    `services.row_aggregator`, which nests child values under their parent.
"""

__version__ = "1.0.0"
