"""
Tagboard Backend - Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error cases the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers in main.py turn them into JSON error responses.
Who:   Raised by services and the row aggregator; caught by global handlers.

Exception Hierarchy:
    TagboardError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict
    ├── InvalidRowError   → 500 Internal Server Error (malformed join row)
    └── DatabaseError     → 500 Internal Server Error (query failed)
"""

from typing import Any, Dict, Optional


class TagboardError(Exception):
    """
    Base exception for all Tagboard application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TagboardError):
    """
    Raised when client input passes schema validation but breaks a business rule.

    HTTP: 400 Bad Request. Pydantic schema violations are still reported by
    FastAPI as 422.
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


class NotFoundError(TagboardError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(TagboardError):
    """
    Raised when a write would violate a uniqueness rule.

    When: creating a tag whose name exists, or a grad whose email is taken.
    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidRowError(TagboardError):
    """
    Raised by the row aggregator when a join row cannot be grouped.

    When: the row is not a mapping, lacks the parent identifier or child
    column, or its identifier is None or of an unusable type.
    HTTP: 500. The rows come from our own queries, so a bad row is a server
    fault, and the whole batch is rejected rather than returned truncated.

    Attributes:
        index: Position of the offending row in the input sequence
    """

    def __init__(
        self,
        message: str = "A result row could not be aggregated",
        index: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if index is not None:
            ctx["row_index"] = index
        super().__init__(message=message, context=ctx)
        self.index = index


class DatabaseError(TagboardError):
    """
    Raised when a database operation fails unexpectedly.

    The client always receives a generic message; the original exception
    type is kept in `context` for the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
