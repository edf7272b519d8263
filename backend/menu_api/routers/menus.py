"""
Menu endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from menu_api.routers._common import (
    PaginatedResponse,
    data_response,
    get_locale_context,
    get_menu_item_service,
    get_menu_service,
    get_query_spec,
)
from menu_api.routers.schemas import AttributesUpdate, MenuCreate, MenuOutput
from menu_api.services.context import LocaleContext
from menu_api.services.domain import MenuItemService, MenuService
from menu_api.services.query import QuerySpec
from shared.infrastructure.db import get_db, transaction
from shared.utils.exceptions import NotFoundError


router = APIRouter(tags=["menus"])


@router.get("/menus")
def list_menus(
    spec: QuerySpec = Depends(get_query_spec),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    """List menus. Supports include, fields, filter, page and take."""
    menus, page_meta = service.list(spec)
    items = [MenuOutput.from_entity(m, locale.current_locale()) for m in menus]
    return PaginatedResponse(items=items, page_meta=page_meta).to_dict()


@router.get("/menus/online")
def list_online_menus(
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    """Menus published in the request locale."""
    menus = service.all_online()
    return data_response([MenuOutput.from_entity(m, locale.current_locale()) for m in menus])


@router.get("/menus/{criteria}")
def get_menu(
    criteria: str,
    spec: QuerySpec = Depends(get_query_spec),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    """Get a menu by id, or by the column named in filter.field."""
    menu = service.get_one(criteria, spec)
    if menu is None:
        raise NotFoundError("Menu", criteria)
    return data_response(MenuOutput.from_entity(menu, locale.current_locale()))


@router.get("/menus/{menu_id}/tree")
def get_menu_tree(
    menu_id: int,
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Nested items of a menu, below its root item."""
    return data_response(service.tree(menu_id))


@router.post("/menus", status_code=status.HTTP_201_CREATED)
def create_menu(
    body: MenuCreate,
    db: Session = Depends(get_db),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    """Create a menu together with its root item."""
    with transaction(db, "create menu"):
        menu = service.create(body.attributes.model_dump())
    return data_response(MenuOutput.from_entity(menu, locale.current_locale()))


@router.put("/menus/{criteria}")
def update_menu(
    criteria: str,
    body: AttributesUpdate,
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    with transaction(db, "update menu"):
        menu = service.update_by_criteria(criteria, body.attributes, spec)
    if menu is None:
        raise NotFoundError("Menu", criteria)
    return data_response(MenuOutput.from_entity(menu, locale.current_locale()))


@router.delete("/menus/{criteria}")
def delete_menu(
    criteria: str,
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    service: MenuService = Depends(get_menu_service),
) -> dict[str, Any]:
    """Delete a menu and all its items. Deleting a missing menu succeeds."""
    with transaction(db, "delete menu"):
        service.delete_by_criteria(criteria, spec)
    return data_response("Menu deleted")
