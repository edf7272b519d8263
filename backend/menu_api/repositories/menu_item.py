"""
Menu Item Repository.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from menu_api.models import MenuItem
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.events.hooks import EntityHooks
from shared.config.constants import EntityTypes

from .base import QueryRepository


class MenuItemRepository(QueryRepository[MenuItem]):
    """Menu items, scoped to the current tenant."""

    entity_type = EntityTypes.MENU_ITEM

    def __init__(
        self,
        session: Session,
        tenant: TenantContext,
        locale: LocaleContext,
        *,
        hooks: EntityHooks | None = None,
    ):
        super().__init__(MenuItem, session, tenant, locale, hooks=hooks)

    def get_root_for_menu(self, menu_id: int) -> MenuItem | None:
        """The root item of a menu."""
        query = (
            self._base_query()
            .where(MenuItem.menu_id == menu_id, MenuItem.is_root.is_(True))
            .order_by(MenuItem.id.asc())
            .limit(1)
        )
        return self._session.scalar(query)

    def items_for_menu(self, menu_id: int, *, with_translations: bool = False) -> list[MenuItem]:
        """Every item of a menu, root included, in sibling order."""
        query = (
            self._base_query()
            .where(MenuItem.menu_id == menu_id)
            .order_by(MenuItem.position.asc(), MenuItem.id.asc())
        )
        if with_translations:
            query = query.options(selectinload(MenuItem.translations))
        return list(self._session.scalars(query).all())

    def siblings(self, menu_id: int, parent_id: int | None) -> list[MenuItem]:
        """Children of parent_id within a menu, ordered by position."""
        parent_clause = (
            MenuItem.parent_id.is_(None) if parent_id is None else MenuItem.parent_id == parent_id
        )
        query = (
            self._base_query()
            .where(MenuItem.menu_id == menu_id, parent_clause)
            .order_by(MenuItem.position.asc(), MenuItem.id.asc())
        )
        return list(self._session.scalars(query).all())

    def next_position(self, menu_id: int, parent_id: int | None) -> int:
        """Position after the last sibling, 0 for the first child."""
        parent_clause = (
            MenuItem.parent_id.is_(None) if parent_id is None else MenuItem.parent_id == parent_id
        )
        query = select(func.max(MenuItem.position)).where(MenuItem.menu_id == menu_id, parent_clause)
        last = self._session.scalar(query)
        return 0 if last is None else last + 1
