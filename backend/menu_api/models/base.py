"""
Base class and mixins for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# BIGINT in production, INTEGER on SQLite so primary keys autoincrement there
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """
    Creation and modification timestamps.

    Timestamps are set client-side so rows created within the same second
    still carry distinct, sortable values.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=True
    )


class TranslatableMixin:
    """
    Mixin for models with per-locale translation rows.

    Subclasses declare:
    - translations: one-to-many relationship to the translation model
    - __translated_attributes__: translation columns accepted as plain keys
      (applied to the current locale when filling)
    """

    __translated_attributes__ = ()

    def translate(self, locale: str) -> Any | None:
        """Translation row for a locale, or None when the entity has none."""
        for translation in self.translations:
            if translation.locale == locale:
                return translation
        return None

    def title_for(self, locale: str) -> str | None:
        translation = self.translate(locale)
        return translation.title if translation is not None else None

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        return f"<{class_name}(id={getattr(self, 'id', None)})>"
