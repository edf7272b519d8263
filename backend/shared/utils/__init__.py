"""
Utilities module: Exceptions.
"""

from shared.utils.exceptions import (
    AppException,
    DatabaseError,
    HierarchyError,
    InternalError,
    MalformedQueryError,
    MissingReferenceError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AppException",
    "DatabaseError",
    "HierarchyError",
    "InternalError",
    "MalformedQueryError",
    "MissingReferenceError",
    "NotFoundError",
    "ValidationError",
]
