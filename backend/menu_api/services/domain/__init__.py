"""
Domain services: business rules for menus and the menu item hierarchy.

Usage:
    from menu_api.services.domain import MenuItemService, MenuService

    with transaction(db, "create menu"):
        menu = MenuService(db, tenant, locale).create({"name": "main"})
"""

from .menu_item_service import MenuItemService
from .menu_service import MenuService
from .menu_tree import MenuTree

__all__ = [
    "MenuItemService",
    "MenuService",
    "MenuTree",
]
