"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from shared.config.logging import get_logger
from shared.config.settings import DATABASE_URL
from shared.utils.exceptions import AppException, DatabaseError

logger = get_logger(__name__)


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def _engine_options(url: str) -> dict[str, Any]:
    """Engine keyword arguments for the configured backend."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for connection from pool
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "connect_args": {"connect_timeout": 10},
    }


engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/menus")
        def list_menus(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            db.scalars(select(Menu)).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, operation: str = "write") -> Generator[Session, None, None]:
    """
    Atomic unit of work for mutating operations.

    Commits when the block finishes, rolls back when anything inside it
    raises (hooks included). Application errors propagate unchanged;
    store failures surface as DatabaseError.

    Usage:
        with transaction(db, "update menu item"):
            service.update_by_criteria(criteria, data, spec)
    """
    try:
        yield db
        db.commit()
    except AppException:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Transaction rolled back", operation=operation, error=str(e))
        raise DatabaseError(operation) from e
    except Exception:
        db.rollback()
        logger.warning("Transaction rolled back", operation=operation)
        raise
