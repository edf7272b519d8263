"""
Menu Item Service - hierarchy manager for menu items.

Keeps the tree invariants of a menu before delegating persistence to
MenuItemRepository:
- an item saved without parent_id is attached to the menu's root item
- items linked to a page get a URI per supported locale
- reordering is planned and validated on a MenuTree before any write

Callers run every command inside shared.infrastructure.db.transaction.

Usage:
    from menu_api.services.domain import MenuItemService

    service = MenuItemService(db, tenant, locale, uri_generator=generator)
    with transaction(db, "reorder menu items"):
        service.update_orders({"menuitems": [{"id": 5}, {"id": 3}, {"id": 4}]})
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from menu_api.models import MenuItem
from menu_api.repositories import MenuItemRepository, MenuRepository, PageMeta
from menu_api.services.context import LocaleContext, TenantContext
from menu_api.services.domain.menu_tree import MenuTree
from menu_api.services.events.hooks import EntityHooks
from menu_api.services.query.spec import QuerySpec
from menu_api.services.uri_generator import MenuItemUriGenerator, UriGenerator
from shared.config.constants import LinkType
from shared.config.logging import get_logger
from shared.utils.exceptions import HierarchyError, MissingReferenceError, ValidationError

logger = get_logger(__name__)

# Marks an ordering entry that keeps its current parent
_KEEP_PARENT = object()

# Attributes that place an item in a tree
_PLACEMENT_KEYS = frozenset({"menu_id", "parent_id"})


class MenuItemService:
    """
    Service for menu item management.

    Business rules:
    - Every menu has exactly one root item, created with the menu
    - The root item cannot be moved or deleted
    - A parent must belong to the same menu as its child
    - Positions order siblings; gaps are allowed
    """

    def __init__(
        self,
        db: Session,
        tenant: TenantContext,
        locale: LocaleContext,
        *,
        uri_generator: UriGenerator | None = None,
        hooks: EntityHooks | None = None,
    ):
        self._db = db
        self._locale = locale
        self._repo = MenuItemRepository(db, tenant, locale, hooks=hooks)
        self._menus = MenuRepository(db, tenant, locale)
        self._uri_generator = uri_generator or MenuItemUriGenerator(db)

    @property
    def repo(self) -> MenuItemRepository:
        return self._repo

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list(self, spec: QuerySpec | None = None) -> tuple[list[MenuItem], PageMeta | None]:
        return self._repo.list(spec)

    def get_one(self, criteria: Any, spec: QuerySpec | None = None) -> MenuItem | None:
        return self._repo.get_one(criteria, spec)

    def get_root_for_menu(self, menu_id: int) -> MenuItem | None:
        return self._repo.get_root_for_menu(menu_id)

    def tree(self, menu_id: int) -> list[dict[str, Any]]:
        """Nested items of a menu below its root, titles in the current locale."""
        if self._menus.find_by_id(menu_id) is None:
            raise MissingReferenceError("menu", menu_id)
        locale = self._locale.current_locale()
        tree = MenuTree(self._repo.items_for_menu(menu_id, with_translations=True))

        def render(item: MenuItem) -> dict[str, Any]:
            translation = item.translate(locale)
            return {
                "id": item.id,
                "parent_id": item.parent_id,
                "position": item.position,
                "link_type": item.link_type,
                "page_id": item.page_id,
                "title": translation.title if translation else None,
                "uri": translation.uri if translation else None,
                "url": translation.url if translation else None,
            }

        return tree.nested(render)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create(self, data: Mapping[str, Any]) -> MenuItem:
        """
        Create an item in a menu.

        parent_id defaults to the menu's root item; position defaults to
        the end of the sibling list.
        """
        data = self._clean(data)
        menu_id = data.get("menu_id")
        if menu_id is None or self._menus.find_by_id(menu_id) is None:
            raise MissingReferenceError("menu", menu_id)

        self._resolve_parent(data, menu_id)
        self._generate_uris(data)
        if data.get("position") is None:
            data["position"] = self._repo.next_position(menu_id, data["parent_id"])

        return self._repo.create(data)

    def update_by_criteria(
        self,
        criteria: Any,
        data: Mapping[str, Any],
        spec: QuerySpec | None = None,
    ) -> MenuItem | None:
        """
        Update the item matching criteria.

        Returns:
            The updated item, or None when nothing matches (no write happens).

        Raises:
            MissingReferenceError: The target menu or parent does not exist.
            HierarchyError: The new parent would break the tree.
        """
        item = self._repo.find_first(criteria, spec)
        if item is None:
            return None

        data = self._clean(data)
        menu_id = data.get("menu_id", item.menu_id)
        if item.is_root and menu_id != item.menu_id:
            raise HierarchyError("The root item cannot move to another menu", item_id=item.id)
        if self._menus.find_by_id(menu_id) is None:
            raise MissingReferenceError("menu", menu_id)
        if menu_id != item.menu_id and item.children:
            raise HierarchyError(
                "Items with children cannot move to another menu", item_id=item.id
            )

        if item.is_root:
            data.pop("parent_id", None)
        else:
            self._resolve_parent(data, menu_id, item=item)
        self._generate_uris(data, item=item)

        return self._repo.update(item, data)

    def delete_by_criteria(self, criteria: Any, spec: QuerySpec | None = None) -> None:
        """Delete the item matching criteria (and its subtree). No match is a no-op."""
        item = self._repo.find_first(criteria, spec)
        if item is None:
            return
        if item.is_root:
            raise ValidationError("The root item of a menu cannot be deleted", item_id=item.id)
        self._repo.delete(item)

    def update_items(self, spec: QuerySpec, data: Mapping[str, Any]) -> list[MenuItem]:
        """
        Apply the same update to every item selected by spec.

        The spec is evaluated once; the update then targets exactly the
        selected ids. Tree placement is changed through update_orders only.
        """
        data = self._clean(data)
        placement = sorted(key for key in _PLACEMENT_KEYS if key in data)
        if placement:
            raise ValidationError(
                "Bulk updates cannot change the placement of menu items", fields=placement
            )
        items, _ = self._repo.list(spec)
        item_ids = [item.id for item in items]
        logger.info("Bulk updating menu items", count=len(item_ids))
        return self._repo.bulk_update(item_ids, data)

    def delete_items(self, spec: QuerySpec) -> list[int]:
        """
        Delete every item selected by spec.

        Returns:
            The deleted ids.
        """
        items, _ = self._repo.list(spec)
        roots = [item.id for item in items if item.is_root]
        if roots:
            raise ValidationError("The root item of a menu cannot be deleted", item_ids=roots)
        item_ids = [item.id for item in items]
        logger.info("Bulk deleting menu items", count=len(item_ids))
        self._repo.bulk_delete(item_ids)
        return item_ids

    def update_orders(self, ordering: Mapping[str, Any] | Sequence[Any]) -> list[MenuItem]:
        """
        Reassign parents and positions of menu items.

        Accepts {"menuitems": [...]} or a bare list. Entries are item ids or
        mappings with "id" and optional "parent_id", "position" and
        "children" (nested entries whose parent is the enclosing item).

        - no "parent_id" key: the item keeps its parent
        - "parent_id": null attaches the item to the menu's root
        - no "position": order of appearance among entries of the same parent

        All entries are validated against the menu tree before any row is
        written; every write is flushed before returning.
        """
        entries = self._flatten(self._ordering_entries(ordering))
        if not entries:
            return []

        item_ids = [item_id for item_id, _, _ in entries]
        duplicates = sorted({item_id for item_id in item_ids if item_ids.count(item_id) > 1})
        if duplicates:
            raise ValidationError("Menu items listed more than once", item_ids=duplicates)

        items = {item.id: item for item in self._repo.find_by_ids(item_ids)}
        missing = [item_id for item_id in item_ids if item_id not in items]
        if missing:
            raise MissingReferenceError("menu item", ", ".join(str(i) for i in missing))

        menu_ids = {item.menu_id for item in items.values()}
        if len(menu_ids) > 1:
            raise HierarchyError("Items of different menus cannot be reordered together")
        menu_id = menu_ids.pop()

        tree = MenuTree(self._repo.items_for_menu(menu_id))
        next_slot: dict[int | None, int] = {}
        for item_id, parent, position in entries:
            if parent is _KEEP_PARENT:
                parent_id = tree.parent_of(item_id)
            elif parent is None:
                parent_id = tree.root_id
            else:
                parent_id = parent
            if position is None:
                position = next_slot.get(parent_id, 0)
            next_slot[parent_id] = position + 1
            tree.move(item_id, parent_id, position)
        tree.validate()

        changes = tree.changes()
        for item_id, (parent_id, position) in changes.items():
            self._repo.update(tree.item(item_id), {"parent_id": parent_id, "position": position})

        # Relationship collections loaded before the writes are stale now
        self._db.expire_all()
        logger.info("Reordered menu items", menu_id=menu_id, changed=len(changes))
        return [items[item_id] for item_id in item_ids]

    # =========================================================================
    # Helpers
    # =========================================================================

    def _clean(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Copy of request data without attributes managed by this service."""
        cleaned = dict(data)
        cleaned.pop("is_root", None)
        return cleaned

    def _resolve_parent(self, data: dict[str, Any], menu_id: int, item: MenuItem | None = None) -> None:
        """Default parent_id to the menu root and check it belongs to the menu."""
        parent_id = data.get("parent_id")
        if parent_id is None:
            root = self._repo.get_root_for_menu(menu_id)
            if root is None:
                raise MissingReferenceError("root item of menu", menu_id)
            data["parent_id"] = root.id
            return

        parent = self._repo.find_by_id(parent_id)
        if parent is None or parent.menu_id != menu_id:
            raise MissingReferenceError("parent menu item", parent_id, menu_id=menu_id)

        if item is not None:
            tree = MenuTree(self._repo.items_for_menu(menu_id))
            if item.id in tree:
                tree.move(item.id, parent_id, tree.position_of(item.id))
                tree.ancestors(item.id)

    def _generate_uris(self, data: dict[str, Any], item: MenuItem | None = None) -> None:
        """Set the uri of every supported locale for items linked to a page."""
        link_type = data.get("link_type", item.link_type if item is not None else LinkType.PAGE)
        page_id = data.get("page_id", item.page_id if item is not None else None)
        if link_type != LinkType.PAGE or not page_id:
            return

        parent_id = data.get("parent_id", item.parent_id if item is not None else None)
        for locale in self._locale.supported_locales():
            values = dict(data.get(locale) or {})
            values["uri"] = self._uri_generator.generate_uri(page_id, parent_id, locale)
            data[locale] = values

    def _ordering_entries(self, ordering: Mapping[str, Any] | Sequence[Any]) -> Sequence[Any]:
        if isinstance(ordering, Mapping):
            ordering = ordering.get("menuitems")
        if not isinstance(ordering, Sequence) or isinstance(ordering, (str, bytes)):
            raise ValidationError("Ordering must be a list of menu items")
        return ordering

    def _flatten(self, entries: Sequence[Any], parent: Any = _KEEP_PARENT) -> list[tuple[int, Any, int | None]]:
        """(item_id, parent, position) for each entry, children after their parent."""
        flat: list[tuple[int, Any, int | None]] = []
        for entry in entries:
            if isinstance(entry, Mapping):
                item_id = self._as_id(entry.get("id"))
                entry_parent = entry["parent_id"] if "parent_id" in entry else parent
                if entry_parent is not None and entry_parent is not _KEEP_PARENT:
                    entry_parent = self._as_id(entry_parent)
                position = entry.get("position")
                if position is not None:
                    position = self._as_position(position)
                flat.append((item_id, entry_parent, position))
                children = entry.get("children") or []
                flat.extend(self._flatten(self._ordering_entries(children), parent=item_id))
            else:
                flat.append((self._as_id(entry), parent, None))
        return flat

    @staticmethod
    def _as_id(value: Any) -> int:
        if isinstance(value, bool):
            raise ValidationError("Menu item ids must be integers", value=value)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("Menu item ids must be integers", value=value)

    @staticmethod
    def _as_position(value: Any) -> int:
        try:
            position = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Positions must be integers", value=value)
        if position < 0:
            raise ValidationError("Positions cannot be negative", value=value)
        return position
