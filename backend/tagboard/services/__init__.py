# Services package init
"""
Tagboard Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services take an AsyncSession plus validated payloads, run queries,
       and return response schemas. Routes stay thin.

Service Inventory:
    - row_aggregator: Nests flat join rows into one object per parent
    - MessageService: Messages CRUD and tag links (many-to-many)
    - TagService:     Tags CRUD with per-tag message counts
    - GradService:    Grads CRUD and nested offers (one-to-many)
    - db_errors:      SQLAlchemy error → DatabaseError translation
"""
