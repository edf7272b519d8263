"""
Menu item endpoints.

Bulk endpoints select their targets with the same query parameters as
the list endpoint (filter, take, page...), then mutate exactly that set.
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from menu_api.routers._common import (
    PaginatedResponse,
    data_response,
    get_locale_context,
    get_menu_item_service,
    get_query_spec,
)
from menu_api.routers.schemas import (
    AttributesUpdate,
    MenuItemCreate,
    MenuItemOutput,
    OrderingUpdate,
)
from menu_api.services.context import LocaleContext
from menu_api.services.domain import MenuItemService
from menu_api.services.query import QuerySpec
from shared.infrastructure.db import get_db, transaction
from shared.utils.exceptions import NotFoundError


router = APIRouter(tags=["menu-items"])


@router.get("/menuitems")
def list_menu_items(
    spec: QuerySpec = Depends(get_query_spec),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """List menu items. Supports include, fields, filter, page and take."""
    items, page_meta = service.list(spec)
    output = [MenuItemOutput.from_entity(i, locale.current_locale()) for i in items]
    return PaginatedResponse(items=output, page_meta=page_meta).to_dict()


# Fixed paths are registered before /menuitems/{criteria}


@router.put("/menuitems/order")
def update_menu_item_order(
    body: OrderingUpdate,
    db: Session = Depends(get_db),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Reassign parents and positions. All-or-nothing."""
    with transaction(db, "reorder menu items"):
        items = service.update_orders(body.attributes)
    return data_response({"updated": [item.id for item in items]})


@router.put("/menuitems/bulk")
def update_menu_items(
    body: AttributesUpdate,
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Apply the same attributes to every item matched by the query."""
    with transaction(db, "bulk update menu items"):
        items = service.update_items(spec, body.attributes)
    return data_response([MenuItemOutput.from_entity(i, locale.current_locale()) for i in items])


@router.delete("/menuitems/bulk")
def delete_menu_items(
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Delete every item matched by the query."""
    with transaction(db, "bulk delete menu items"):
        deleted = service.delete_items(spec)
    return data_response({"deleted": deleted})


@router.get("/menuitems/{criteria}")
def get_menu_item(
    criteria: str,
    spec: QuerySpec = Depends(get_query_spec),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    item = service.get_one(criteria, spec)
    if item is None:
        raise NotFoundError("Menu item", criteria)
    return data_response(MenuItemOutput.from_entity(item, locale.current_locale()))


@router.post("/menuitems", status_code=status.HTTP_201_CREATED)
def create_menu_item(
    body: MenuItemCreate,
    db: Session = Depends(get_db),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Create a menu item. parent_id defaults to the menu's root item."""
    # Unset optional columns keep their model defaults
    attributes = {k: v for k, v in body.attributes.model_dump().items() if v is not None}
    with transaction(db, "create menu item"):
        item = service.create(attributes)
    return data_response(MenuItemOutput.from_entity(item, locale.current_locale()))


@router.put("/menuitems/{criteria}")
def update_menu_item(
    criteria: str,
    body: AttributesUpdate,
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    locale: LocaleContext = Depends(get_locale_context),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """
    Update a menu item. Omitting parent_id attaches the item to the
    menu's root item; page links get their URIs regenerated.
    """
    with transaction(db, "update menu item"):
        item = service.update_by_criteria(criteria, body.attributes, spec)
    if item is None:
        raise NotFoundError("Menu item", criteria)
    return data_response(MenuItemOutput.from_entity(item, locale.current_locale()))


@router.delete("/menuitems/{criteria}")
def delete_menu_item(
    criteria: str,
    spec: QuerySpec = Depends(get_query_spec),
    db: Session = Depends(get_db),
    service: MenuItemService = Depends(get_menu_item_service),
) -> dict[str, Any]:
    """Delete a menu item and its descendants. Deleting a missing item succeeds."""
    with transaction(db, "delete menu item"):
        service.delete_by_criteria(criteria, spec)
    return data_response("Item deleted")
