"""
Centralized HTTP exceptions for consistent error handling.

Core operations raise these directly. Being HTTPExceptions, FastAPI renders
them as {"detail": ...} responses with their status code.

Usage:
    from shared.utils.exceptions import NotFoundError, MalformedQueryError

    raise NotFoundError("Menu", menu_id)
    raise MalformedQueryError("filter.date.from is not a valid date", value="yesterday")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        # Log the error with context
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return str(self.detail)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Menu item", 123)
        raise NotFoundError("Menu", criteria, field="name")
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class MalformedQueryError(AppException):
    """
    Query parameters with an invalid shape (400).

    Usage:
        raise MalformedQueryError("take must be a positive integer", value="abc")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Malformed query: {detail}",
            log_level="warning",
            **log_context,
        )


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("The root item of a menu cannot be deleted")
        raise ValidationError("Invalid position", field="position", value=-1)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class MissingReferenceError(ValidationError):
    """A referenced menu or parent item does not exist."""

    def __init__(self, entity: str, entity_id: int | str | None, **log_context: Any):
        detail = f"Referenced {entity} {entity_id} does not exist"
        super().__init__(detail, entity=entity, entity_id=entity_id, **log_context)


class HierarchyError(ValidationError):
    """Requested parent assignment breaks the menu tree."""

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(detail, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to render menu", menu_id=123)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
