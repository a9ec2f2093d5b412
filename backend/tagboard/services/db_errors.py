"""
Tagboard Backend - Database Error Translation
==============================================

What:  Context manager that turns SQLAlchemy failures into DatabaseError.
Who:   Wrapped around every query in the service layer.

Application exceptions (NotFoundError, ConflictError, ...) raised inside the
block pass through untouched. Only SQLAlchemyError is translated, with the
original type kept in the context for the server log.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError

from tagboard.exceptions import DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(action: str, **context: Any) -> Iterator[None]:
    """
    Re-raise SQLAlchemy errors from the block as DatabaseError.

    Args:
        action:  Short description used in the log line and client message,
                 e.g. "list messages"
        context: Extra identifiers to log (message_id=..., grad_id=...)
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s | %s", action, e, context, exc_info=True)
        raise DatabaseError(
            message=f"Could not {action}. Please try again.",
            context={"error_type": type(e).__name__, **{k: str(v) for k, v in context.items()}},
        ) from e
