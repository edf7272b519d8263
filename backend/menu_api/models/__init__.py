"""
SQLAlchemy ORM Models Package.

- base: Base class, TimestampMixin, TranslatableMixin
- menu: Menu, MenuTranslation, MenuItem, MenuItemTranslation
"""

from .base import Base, TimestampMixin, TranslatableMixin
from .menu import Menu, MenuTranslation, MenuItem, MenuItemTranslation

__all__ = [
    "Base",
    "TimestampMixin",
    "TranslatableMixin",
    "Menu",
    "MenuTranslation",
    "MenuItem",
    "MenuItemTranslation",
]
