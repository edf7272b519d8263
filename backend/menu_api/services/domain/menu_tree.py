"""
MenuTree - in-memory view of one menu's item hierarchy.

Nodes are kept in an arena keyed by item id with a parent index, so
reparenting and reordering can be planned and validated before any row
is touched.

Usage:
    tree = MenuTree(repo.items_for_menu(menu_id))
    tree.move(item_id, parent_id=tree.root_id, position=0)
    tree.validate()
    nested = tree.nested(lambda item: {"id": item.id})
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from menu_api.models import MenuItem
from shared.utils.exceptions import HierarchyError


class MenuTree:
    """Arena of menu items with a parent index."""

    def __init__(self, items: Iterable[MenuItem]):
        self._items: dict[int, MenuItem] = {}
        self._parent: dict[int, int | None] = {}
        self._position: dict[int, int] = {}
        self._root_id: int | None = None

        for item in items:
            self._items[item.id] = item
            self._parent[item.id] = item.parent_id
            self._position[item.id] = item.position or 0
            if item.is_root and self._root_id is None:
                self._root_id = item.id

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    @property
    def root_id(self) -> int | None:
        return self._root_id

    def item(self, item_id: int) -> MenuItem:
        return self._items[item_id]

    def parent_of(self, item_id: int) -> int | None:
        return self._parent[item_id]

    def position_of(self, item_id: int) -> int:
        return self._position[item_id]

    def children_of(self, parent_id: int | None) -> list[int]:
        """Child ids in sibling order (position, then id)."""
        children = [item_id for item_id, parent in self._parent.items() if parent == parent_id]
        return sorted(children, key=lambda item_id: (self._position[item_id], item_id))

    def move(self, item_id: int, parent_id: int | None, position: int) -> None:
        """Plan a new parent and position for an item."""
        if item_id not in self._items:
            raise HierarchyError(f"Item {item_id} does not belong to this menu", item_id=item_id)
        if parent_id is not None and parent_id not in self._items:
            raise HierarchyError(
                f"Parent {parent_id} does not belong to this menu", item_id=item_id, parent_id=parent_id
            )
        if item_id == self._root_id:
            raise HierarchyError("The root item cannot be moved", item_id=item_id)
        if parent_id == item_id:
            raise HierarchyError(f"Item {item_id} cannot be its own parent", item_id=item_id)
        self._parent[item_id] = parent_id
        self._position[item_id] = position

    def ancestors(self, item_id: int) -> list[int]:
        """Parent chain from the direct parent upwards."""
        chain: list[int] = []
        seen = {item_id}
        parent = self._parent.get(item_id)
        while parent is not None:
            if parent in seen:
                raise HierarchyError("Menu items form a cycle", item_id=item_id, parent_id=parent)
            chain.append(parent)
            seen.add(parent)
            parent = self._parent.get(parent)
        return chain

    def validate(self) -> None:
        """Every item reaches the top without a cycle."""
        for item_id in self._items:
            self.ancestors(item_id)

    def changes(self) -> dict[int, tuple[int | None, int]]:
        """Planned (parent_id, position) of items whose values differ from the rows."""
        changed = {}
        for item_id, item in self._items.items():
            planned = (self._parent[item_id], self._position[item_id])
            if planned != (item.parent_id, item.position):
                changed[item_id] = planned
        return changed

    def nested(self, render: Callable[[MenuItem], dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Nested representation below the root (or top-level items when the
        menu has no root item). Each node gets a "children" list.
        """
        self.validate()
        top = self.children_of(self._root_id)
        return [self._render(item_id, render) for item_id in top]

    def _render(self, item_id: int, render: Callable[[MenuItem], dict[str, Any]]) -> dict[str, Any]:
        node = render(self._items[item_id])
        node["children"] = [self._render(child, render) for child in self.children_of(item_id)]
        return node
