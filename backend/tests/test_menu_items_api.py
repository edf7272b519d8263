"""
Tests for the menu item endpoints.
"""

import json

import pytest

MENUS = "/api/imenu/menus"
ITEMS = "/api/imenu/menuitems"


@pytest.fixture
def menu(client):
    response = client.post(MENUS, json={"attributes": {"name": "main", "en": {"title": "Main", "status": True}}})
    return response.json()["data"]


@pytest.fixture
def root(client, menu):
    response = client.get(ITEMS, params={"filter": json.dumps({"menu_id": menu["id"], "is_root": True})})
    return response.json()["data"][0]


def create_item(client, menu, **attributes):
    payload = {"menu_id": menu["id"], "link_type": "url", **attributes}
    response = client.post(ITEMS, json={"attributes": payload})
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestMenuItemEndpoints:
    def test_create_attaches_to_root(self, client, menu, root):
        item = create_item(client, menu, en={"title": "Blog", "url": "https://example.com/blog"})

        assert item["parent_id"] == root["id"]
        assert item["position"] == 0
        assert item["title"] == "Blog"
        assert item["url"] == "https://example.com/blog"

    def test_create_serializes_class(self, client, menu):
        item = create_item(client, menu, **{"class": "highlight"})

        assert item["class"] == "highlight"

    def test_create_in_missing_menu(self, client):
        response = client.post(ITEMS, json={"attributes": {"menu_id": 999999}})
        assert response.status_code == 400

    def test_create_requires_menu(self, client):
        response = client.post(ITEMS, json={"attributes": {"link_type": "url"}})
        assert response.status_code == 422

    def test_update_generates_page_uri(self, client, menu, root):
        item = create_item(client, menu)

        response = client.put(
            f"{ITEMS}/{item['id']}", json={"attributes": {"link_type": "page", "page_id": 42}}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["uri"] == "page-42"
        assert data["translations"]["es"]["uri"] == "page-42"
        assert data["parent_id"] == root["id"]

    def test_update_missing_item(self, client, menu):
        response = client.put(f"{ITEMS}/999999", json={"attributes": {"icon": "x"}})
        assert response.status_code == 404

    def test_update_self_parent(self, client, menu):
        item = create_item(client, menu)

        response = client.put(f"{ITEMS}/{item['id']}", json={"attributes": {"parent_id": item["id"]}})

        assert response.status_code == 400

    def test_delete_root_rejected(self, client, root):
        assert client.delete(f"{ITEMS}/{root['id']}").status_code == 400
        assert client.get(f"{ITEMS}/{root['id']}").status_code == 200

    def test_delete_is_idempotent(self, client, menu):
        item = create_item(client, menu)

        assert client.delete(f"{ITEMS}/{item['id']}").status_code == 200
        assert client.delete(f"{ITEMS}/{item['id']}").status_code == 200
        assert client.get(f"{ITEMS}/{item['id']}").status_code == 404


class TestOrderingAndTree:
    def test_reorder_and_tree(self, client, menu):
        a = create_item(client, menu, en={"title": "A"})
        b = create_item(client, menu, en={"title": "B"})
        c = create_item(client, menu, en={"title": "C"})

        response = client.put(
            f"{ITEMS}/order",
            json={"attributes": {"menuitems": [{"id": c["id"], "children": [{"id": a["id"]}]}, b["id"]]}},
        )
        assert response.status_code == 200
        assert response.json()["data"]["updated"] == [c["id"], a["id"], b["id"]]

        tree = client.get(f"{MENUS}/{menu['id']}/tree").json()["data"]
        assert [node["title"] for node in tree] == ["C", "B"]
        assert [node["title"] for node in tree[0]["children"]] == ["A"]

    def test_reorder_failure_changes_nothing(self, client, menu):
        a = create_item(client, menu)
        b = create_item(client, menu)

        response = client.put(
            f"{ITEMS}/order", json={"attributes": [b["id"], a["id"], 999999]}
        )

        assert response.status_code == 400
        positions = {
            i["id"]: i["position"]
            for i in client.get(ITEMS, params={"filter": json.dumps({"is_root": False})}).json()["data"]
        }
        assert positions == {a["id"]: 0, b["id"]: 1}

    def test_tree_of_missing_menu(self, client):
        assert client.get(f"{MENUS}/999999/tree").status_code == 400


class TestBulkEndpoints:
    def test_bulk_update_by_filter(self, client, menu):
        a = create_item(client, menu)
        b = create_item(client, menu)

        response = client.put(
            f"{ITEMS}/bulk",
            params={"filter": json.dumps({"id": [a["id"], b["id"]]})},
            json={"attributes": {"target": "_blank"}},
        )

        assert response.status_code == 200
        assert {i["target"] for i in response.json()["data"]} == {"_blank"}

    def test_bulk_delete_by_filter(self, client, menu, root):
        a = create_item(client, menu)
        create_item(client, menu)

        response = client.delete(f"{ITEMS}/bulk", params={"filter": json.dumps({"is_root": False})})

        assert response.status_code == 200
        assert a["id"] in response.json()["data"]["deleted"]
        remaining = client.get(ITEMS).json()["data"]
        assert [i["id"] for i in remaining] == [root["id"]]

    def test_bulk_delete_refuses_roots(self, client, menu):
        create_item(client, menu)

        response = client.delete(f"{ITEMS}/bulk")

        assert response.status_code == 400
        assert len(client.get(ITEMS).json()["data"]) == 2
