"""
Menu Service - menus and their root item.

Every menu owns exactly one root item, created together with the menu.
Items added without a parent attach to it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from menu_api.models import Menu
from menu_api.repositories import MenuItemRepository, MenuRepository, PageMeta
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.events.hooks import EntityHooks
from menu_api.services.query.spec import QuerySpec
from shared.config.constants import LinkType
from shared.config.logging import get_logger

logger = get_logger(__name__)


class MenuService:
    """Service for menu management."""

    def __init__(
        self,
        db: Session,
        tenant: TenantContext,
        locale: LocaleContext,
        *,
        hooks: EntityHooks | None = None,
        item_hooks: EntityHooks | None = None,
    ):
        self._repo = MenuRepository(db, tenant, locale, hooks=hooks)
        self._items = MenuItemRepository(db, tenant, locale, hooks=item_hooks)

    @property
    def repo(self) -> MenuRepository:
        return self._repo

    def list(self, spec: QuerySpec | None = None) -> tuple[list[Menu], PageMeta | None]:
        return self._repo.list(spec)

    def get_one(self, criteria: Any, spec: QuerySpec | None = None) -> Menu | None:
        return self._repo.get_one(criteria, spec)

    def all_online(self) -> list[Menu]:
        return self._repo.all_online()

    def create(self, data: Mapping[str, Any]) -> Menu:
        """Create a menu and its root item."""
        menu = self._repo.create(data)
        root = self._items.create(
            {
                "menu_id": menu.id,
                "is_root": True,
                "link_type": LinkType.NONE,
                "position": 0,
                "parent_id": None,
            }
        )
        logger.info("Created menu root item", menu_id=menu.id, root_id=root.id)
        return menu

    def update_by_criteria(
        self, criteria: Any, data: Mapping[str, Any], spec: QuerySpec | None = None
    ) -> Menu | None:
        return self._repo.update_by_criteria(criteria, data, spec)

    def delete_by_criteria(self, criteria: Any, spec: QuerySpec | None = None) -> None:
        """Delete a menu with all its items. No match is a no-op."""
        self._repo.delete_by_criteria(criteria, spec)
