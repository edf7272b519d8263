"""
Menu Repository.
"""

from __future__ import annotations

from sqlalchemy.orm import Session, selectinload

from menu_api.models import Menu, MenuTranslation
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.events.hooks import EntityHooks
from shared.config.constants import EntityTypes

from .base import QueryRepository


class MenuRepository(QueryRepository[Menu]):
    """Menus, scoped to the current tenant."""

    entity_type = EntityTypes.MENU

    def __init__(
        self,
        session: Session,
        tenant: TenantContext,
        locale: LocaleContext,
        *,
        hooks: EntityHooks | None = None,
    ):
        super().__init__(Menu, session, tenant, locale, hooks=hooks)

    def all_online(self) -> list[Menu]:
        """Menus published in the current locale, newest first."""
        query = (
            self._base_query()
            .where(
                Menu.translations.any(
                    (MenuTranslation.locale == self._locale.current_locale())
                    & MenuTranslation.status.is_(True)
                )
            )
            .options(selectinload(Menu.translations))
            .order_by(Menu.created_at.desc(), Menu.id.desc())
        )
        return list(self._session.scalars(query).all())
