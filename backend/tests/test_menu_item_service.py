"""
Tests for MenuItemService - the menu item hierarchy manager.

Tests cover:
- Root resolution on create and update
- Parent validation and cycle detection
- URI generation per locale
- Root item protection
- Bulk update / delete by query
- Ordering recompute
- Nested tree rendering
"""

import pytest
from sqlalchemy import select

from menu_api.models import MenuItem
from menu_api.services.query import parse_query_params
from shared.utils.exceptions import HierarchyError, MissingReferenceError, ValidationError


def sibling_ids(item_service, menu_id, parent_id):
    return [item.id for item in item_service.repo.siblings(menu_id, parent_id)]


class TestCreate:
    def test_create_without_parent_attaches_to_root(self, db_session, item_service, seed_menu, seed_root):
        item = item_service.create({"menu_id": seed_menu.id, "link_type": "url", "en": {"title": "Blog"}})
        db_session.commit()

        assert item.parent_id == seed_root.id
        assert item.title_for("en") == "Blog"

    def test_create_appends_position(self, db_session, item_service, seed_menu, seed_items):
        item = item_service.create({"menu_id": seed_menu.id, "link_type": "url"})
        assert item.position == 4

    def test_create_keeps_explicit_position(self, item_service, seed_menu, seed_items):
        item = item_service.create({"menu_id": seed_menu.id, "link_type": "url", "position": 0})
        assert item.position == 0

    def test_create_with_parent(self, item_service, seed_menu, seed_items):
        parent = seed_items["B"]

        item = item_service.create({"menu_id": seed_menu.id, "parent_id": parent.id, "link_type": "url"})

        assert item.parent_id == parent.id
        assert item.position == 0

    def test_create_ignores_is_root(self, item_service, seed_menu, seed_root):
        item = item_service.create({"menu_id": seed_menu.id, "is_root": True, "link_type": "url"})

        assert item.is_root is False
        assert item_service.get_root_for_menu(seed_menu.id).id == seed_root.id

    def test_create_in_missing_menu(self, item_service):
        with pytest.raises(MissingReferenceError):
            item_service.create({"menu_id": 999_999})

    def test_create_with_parent_from_other_menu(self, db_session, menu_service, item_service, seed_menu):
        other = menu_service.create({"name": "footer"})
        db_session.commit()

        with pytest.raises(MissingReferenceError):
            item_service.create({"menu_id": seed_menu.id, "parent_id": other.root_item.id})

    def test_create_generates_uris(self, item_service, seed_menu):
        item = item_service.create({"menu_id": seed_menu.id, "link_type": "page", "page_id": 42})

        assert item.translate("en").uri == "contact"
        assert item.translate("es").uri == "contacto"


class TestUpdate:
    def test_update_without_parent_resolves_root(
        self, db_session, item_service, make_item, seed_menu, seed_root, seed_items
    ):
        nested = make_item(seed_menu, seed_items["B"], "Nested", 0)
        db_session.commit()

        item_service.update_by_criteria(nested.id, {"en": {"title": "Moved"}})
        db_session.commit()
        db_session.expire_all()

        reloaded = db_session.get(MenuItem, nested.id)
        assert reloaded.parent_id == seed_root.id
        assert reloaded.title_for("en") == "Moved"

    def test_update_with_parent(self, db_session, item_service, seed_items):
        item = item_service.update_by_criteria(
            seed_items["A"].id, {"parent_id": seed_items["C"].id}
        )
        db_session.commit()

        assert item.parent_id == seed_items["C"].id

    def test_update_page_link_generates_uri_per_locale(self, db_session, item_service, seed_items):
        item = item_service.update_by_criteria(
            seed_items["A"].id, {"link_type": "page", "page_id": 42}
        )
        db_session.commit()

        en_uri = item.translate("en").uri
        es_uri = item.translate("es").uri
        assert en_uri and es_uri
        assert en_uri != es_uri

    def test_update_page_link_prefixes_parent_pages(self, db_session, item_service, make_item, seed_menu, seed_root):
        about = make_item(seed_menu, seed_root, "About", 0, link_type="page", page_id=10)
        team = make_item(seed_menu, about, "Team", 0, link_type="page", page_id=11)
        db_session.commit()

        item = item_service.update_by_criteria(team.id, {"parent_id": about.id})
        db_session.commit()

        assert item.translate("en").uri == "about/team"
        assert item.translate("es").uri == "acerca/equipo"

    def test_update_url_link_leaves_uris_alone(self, db_session, item_service, seed_items):
        item = seed_items["A"]
        item.translate("en").uri = "legacy/path"
        db_session.commit()

        item_service.update_by_criteria(item.id, {"link_type": "url", "en": {"url": "https://example.com"}})
        db_session.commit()

        translation = db_session.get(MenuItem, item.id).translate("en")
        assert translation.uri == "legacy/path"
        assert translation.url == "https://example.com"

    def test_update_missing_item_writes_nothing(self, db_session, item_service, seed_items):
        before = {i.id: (i.parent_id, i.position) for i in item_service.list()[0]}

        assert item_service.update_by_criteria(999_999, {"position": 9}) is None
        db_session.commit()

        after = {i.id: (i.parent_id, i.position) for i in item_service.list()[0]}
        assert after == before

    def test_update_self_parent_rejected(self, item_service, seed_items):
        item = seed_items["A"]
        with pytest.raises(HierarchyError):
            item_service.update_by_criteria(item.id, {"parent_id": item.id})

    def test_update_into_own_subtree_rejected(self, db_session, item_service, make_item, seed_menu, seed_items):
        child = make_item(seed_menu, seed_items["A"], "Child", 0)
        db_session.commit()

        with pytest.raises(HierarchyError):
            item_service.update_by_criteria(seed_items["A"].id, {"parent_id": child.id})

    def test_update_with_missing_parent(self, item_service, seed_items):
        with pytest.raises(MissingReferenceError):
            item_service.update_by_criteria(seed_items["A"].id, {"parent_id": 999_999})

    def test_update_root_keeps_it_parentless(self, db_session, item_service, seed_root, seed_items):
        item_service.update_by_criteria(seed_root.id, {"parent_id": seed_items["A"].id, "icon": "home"})
        db_session.commit()

        root = db_session.get(MenuItem, seed_root.id)
        assert root.parent_id is None
        assert root.icon == "home"

    def test_root_cannot_change_menu(self, db_session, menu_service, item_service):
        empty = menu_service.create({"name": "empty"})
        footer = menu_service.create({"name": "footer"})
        db_session.commit()

        with pytest.raises(HierarchyError):
            item_service.update_by_criteria(empty.root_item.id, {"menu_id": footer.id})
        db_session.rollback()

        roots = db_session.scalars(select(MenuItem).where(MenuItem.is_root.is_(True))).all()
        assert sorted(r.menu_id for r in roots) == sorted([empty.id, footer.id])

    def test_item_with_children_cannot_change_menu(
        self, db_session, menu_service, item_service, make_item, seed_menu, seed_items
    ):
        make_item(seed_menu, seed_items["A"], "Child", 0)
        other = menu_service.create({"name": "footer"})
        db_session.commit()

        with pytest.raises(HierarchyError):
            item_service.update_by_criteria(seed_items["A"].id, {"menu_id": other.id})

    def test_leaf_moves_to_root_of_other_menu(self, db_session, menu_service, item_service, seed_items):
        other = menu_service.create({"name": "footer"})
        db_session.commit()

        item = item_service.update_by_criteria(seed_items["A"].id, {"menu_id": other.id})
        db_session.commit()

        assert item.menu_id == other.id
        assert item.parent_id == other.root_item.id


class TestDelete:
    def test_delete_removes_subtree(self, db_session, item_service, make_item, seed_menu, seed_items):
        child = make_item(seed_menu, seed_items["A"], "Child", 0)
        db_session.commit()

        item_service.delete_by_criteria(seed_items["A"].id)
        db_session.commit()

        assert item_service.get_one(seed_items["A"].id) is None
        assert item_service.get_one(child.id) is None

    def test_delete_is_idempotent(self, db_session, item_service, seed_items):
        item_service.delete_by_criteria(seed_items["A"].id)
        db_session.commit()
        item_service.delete_by_criteria(seed_items["A"].id)
        db_session.commit()

        assert item_service.get_one(seed_items["A"].id) is None

    def test_root_cannot_be_deleted(self, item_service, seed_root):
        with pytest.raises(ValidationError):
            item_service.delete_by_criteria(seed_root.id)


class TestBulkOperations:
    def test_update_items_by_query(self, db_session, item_service, seed_menu, seed_items):
        spec = parse_query_params({"filter": {"menu_id": seed_menu.id, "is_root": False}})

        updated = item_service.update_items(spec, {"target": "_blank"})
        db_session.commit()

        assert sorted(i.id for i in updated) == sorted(i.id for i in seed_items.values())
        assert all(db_session.get(MenuItem, i.id).target == "_blank" for i in seed_items.values())

    def test_update_items_only_touches_selected(self, db_session, item_service, seed_items):
        spec = parse_query_params({"filter": {"id": [seed_items["A"].id, seed_items["C"].id]}})

        item_service.update_items(spec, {"icon": "star"})
        db_session.commit()

        assert db_session.get(MenuItem, seed_items["B"].id).icon is None
        assert db_session.get(MenuItem, seed_items["A"].id).icon == "star"

    def test_update_items_rejects_placement(self, item_service, seed_items):
        with pytest.raises(ValidationError):
            item_service.update_items(parse_query_params({}), {"parent_id": seed_items["A"].id})

    def test_delete_items_by_query(self, db_session, item_service, seed_menu, seed_root, seed_items):
        spec = parse_query_params({"filter": {"menu_id": seed_menu.id, "is_root": "false"}})

        deleted = item_service.delete_items(spec)
        db_session.commit()

        assert sorted(deleted) == sorted(i.id for i in seed_items.values())
        assert [i.id for i in item_service.list()[0]] == [seed_root.id]

    def test_delete_items_refuses_roots(self, db_session, item_service, seed_items):
        with pytest.raises(ValidationError):
            item_service.delete_items(parse_query_params({}))

        assert len(item_service.list()[0]) == 4


class TestUpdateOrders:
    def test_reorders_siblings(self, db_session, item_service, seed_menu, seed_root, seed_items):
        a, b, c = seed_items["A"], seed_items["B"], seed_items["C"]
        a_id, b_id, c_id = a.id, b.id, c.id

        item_service.update_orders({"menuitems": [b_id, c_id, a_id]})
        db_session.commit()

        assert sibling_ids(item_service, seed_menu.id, seed_root.id) == [b_id, c_id, a_id]

    def test_reorder_returns_items_in_given_order(self, item_service, seed_items):
        ids = [seed_items["C"].id, seed_items["A"].id, seed_items["B"].id]

        items = item_service.update_orders(ids)

        assert [i.id for i in items] == ids
        assert [i.position for i in items] == [0, 1, 2]

    def test_nested_children_reparent(self, db_session, item_service, seed_menu, seed_root, seed_items):
        a_id, b_id, c_id = (seed_items[k].id for k in "ABC")

        item_service.update_orders(
            {"menuitems": [{"id": a_id, "children": [{"id": c_id}, {"id": b_id}]}]}
        )
        db_session.commit()

        assert sibling_ids(item_service, seed_menu.id, seed_root.id) == [a_id]
        assert sibling_ids(item_service, seed_menu.id, a_id) == [c_id, b_id]

    def test_null_parent_means_root(self, db_session, item_service, make_item, seed_menu, seed_root, seed_items):
        child = make_item(seed_menu, seed_items["A"], "Child", 0)
        db_session.commit()

        item_service.update_orders([{"id": child.id, "parent_id": None, "position": 7}])
        db_session.commit()

        moved = db_session.get(MenuItem, child.id)
        assert moved.parent_id == seed_root.id
        assert moved.position == 7

    def test_duplicates_rejected(self, item_service, seed_items):
        a_id = seed_items["A"].id
        with pytest.raises(ValidationError):
            item_service.update_orders([a_id, a_id])

    def test_missing_items_rejected(self, item_service, seed_items):
        with pytest.raises(MissingReferenceError):
            item_service.update_orders([seed_items["A"].id, 999_999])

    def test_items_of_different_menus_rejected(self, db_session, menu_service, item_service, make_item, seed_items):
        other = menu_service.create({"name": "footer"})
        foreign = make_item(other, other.root_item, "Foreign", 0)
        db_session.commit()

        with pytest.raises(HierarchyError):
            item_service.update_orders([seed_items["A"].id, foreign.id])

    def test_cycle_rejected_without_writes(self, db_session, item_service, make_item, seed_menu, seed_items):
        b = seed_items["B"]
        child = make_item(seed_menu, b, "Child", 0)
        db_session.commit()
        before = {i.id: (i.parent_id, i.position) for i in item_service.list()[0]}

        with pytest.raises(HierarchyError):
            item_service.update_orders([seed_items["A"].id, {"id": b.id, "parent_id": child.id}])
        db_session.rollback()

        after = {i.id: (i.parent_id, i.position) for i in item_service.list()[0]}
        assert after == before

    def test_root_cannot_be_moved(self, item_service, seed_root, seed_items):
        with pytest.raises(HierarchyError):
            item_service.update_orders([seed_root.id])

    def test_invalid_entries_rejected(self, item_service, seed_items):
        with pytest.raises(ValidationError):
            item_service.update_orders(["first"])
        with pytest.raises(ValidationError):
            item_service.update_orders({"menuitems": "1,2,3"})
        with pytest.raises(ValidationError):
            item_service.update_orders([{"id": seed_items["A"].id, "position": -1}])

    def test_empty_ordering_is_noop(self, item_service, seed_items):
        assert item_service.update_orders({"menuitems": []}) == []


class TestTree:
    def test_tree_nests_below_root(self, db_session, item_service, make_item, seed_menu, seed_items):
        make_item(seed_menu, seed_items["C"], "Child", 0)
        db_session.commit()

        tree = item_service.tree(seed_menu.id)

        assert [node["title"] for node in tree] == ["Bravo", "Charlie", "Alpha"]
        assert [node["title"] for node in tree[1]["children"]] == ["Child"]
        assert tree[0]["children"] == []

    def test_tree_of_missing_menu(self, item_service):
        with pytest.raises(MissingReferenceError):
            item_service.tree(999_999)
