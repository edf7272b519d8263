"""
Repository Pattern implementation.
Centralizes data access with tenant isolation and QuerySpec-driven queries.

Usage:
    from menu_api.repositories import MenuItemRepository

    repo = MenuItemRepository(db, tenant, locale)
    items, page_meta = repo.list(spec)
    root = repo.get_root_for_menu(menu_id)
"""

from .base import PageMeta, QueryRepository
from .menu import MenuRepository
from .menu_item import MenuItemRepository

__all__ = [
    # Base
    "PageMeta",
    "QueryRepository",
    # Menu
    "MenuRepository",
    # Menu item
    "MenuItemRepository",
]
