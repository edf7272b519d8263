"""
Request-scoped dependencies shared by the menu routers.

Tenant and locale are resolved once per request and handed to the
services explicitly.

Usage:
    @router.get("/menus")
    def list_menus(
        spec: QuerySpec = Depends(get_query_spec),
        service: MenuService = Depends(get_menu_service),
    ):
        ...
"""

from typing import Any

from fastapi import Depends, Header, Query, Request
from sqlalchemy.orm import Session

from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.domain import MenuItemService, MenuService
from menu_api.services.events import LoggingHooks
from menu_api.services.query import QuerySpec, parse_query_params
from menu_api.services.uri_generator import MenuItemUriGenerator, UriGenerator
from shared.config.constants import EntityTypes
from shared.infrastructure.db import get_db


def get_tenant_context(
    tenant_id: int | None = Header(default=None, alias="X-Tenant-ID"),
) -> TenantContext:
    """Tenant from the X-Tenant-ID header; no header means central context."""
    return TenantContext.for_tenant(tenant_id)


def get_locale_context(
    lang: str | None = Query(default=None, description="Locale code, e.g. 'es'"),
    accept_language: str | None = Header(default=None),
) -> LocaleContext:
    """
    Locale from ?lang=, else the first Accept-Language tag.
    Unsupported locales fall back to the default locale.
    """
    requested = lang or _first_language(accept_language)
    return LocaleContext.from_settings(requested)


def _first_language(header: str | None) -> str | None:
    if not header:
        return None
    tag = header.split(",")[0].split(";")[0].strip()
    return tag.split("-")[0].lower() or None


def get_query_spec(
    request: Request,
    locale: LocaleContext = Depends(get_locale_context),
) -> QuerySpec:
    """QuerySpec parsed from the query string (repeated keys become lists)."""
    params: dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values if len(values) > 1 else values[0]
    return parse_query_params(params, locale)


def get_uri_generator(db: Session = Depends(get_db)) -> UriGenerator:
    return MenuItemUriGenerator(db)


def get_menu_service(
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
    locale: LocaleContext = Depends(get_locale_context),
) -> MenuService:
    return MenuService(
        db,
        tenant,
        locale,
        hooks=LoggingHooks(EntityTypes.MENU),
        item_hooks=LoggingHooks(EntityTypes.MENU_ITEM),
    )


def get_menu_item_service(
    db: Session = Depends(get_db),
    tenant: TenantContext = Depends(get_tenant_context),
    locale: LocaleContext = Depends(get_locale_context),
    uri_generator: UriGenerator = Depends(get_uri_generator),
) -> MenuItemService:
    return MenuItemService(
        db,
        tenant,
        locale,
        uri_generator=uri_generator,
        hooks=LoggingHooks(EntityTypes.MENU_ITEM),
    )
