"""
Tests for the categories manager.
"""

import pytest


def create(client, admin, name, **extra):
    payload = {"name": name, "description": f"{name} work", "icon": "code", **extra}
    response = client.post("/api/categories", json=payload, headers=admin["headers"])
    assert response.status_code == 201
    return response.json()


class TestCategoryCrud:
    """Test category create/update/delete."""

    def test_create_returns_stored_category(self, client, admin):
        data = create(client, admin, "Frontend")
        assert data["id"]
        assert data["name"] == "Frontend"
        assert data["order"] == 0
        assert data["is_active"] is True
        assert "created_at" in data

    def test_create_appends_order(self, client, admin):
        create(client, admin, "Frontend")
        assert create(client, admin, "Backend")["order"] == 1

    def test_duplicate_name_rejected(self, client, admin, category):
        response = client.post(
            "/api/categories",
            json={"name": "Backend", "description": "again", "icon": "x"},
            headers=admin["headers"],
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Category already exists"

    def test_name_too_long(self, client, admin):
        response = client.post(
            "/api/categories",
            json={"name": "x" * 51, "description": "d", "icon": "i"},
            headers=admin["headers"],
        )
        assert response.status_code == 400

    def test_update(self, client, admin, category):
        response = client.put(
            f"/api/categories/{category['id']}", json={"description": "APIs"}, headers=admin["headers"]
        )
        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "APIs"
        assert data["name"] == "Backend"

    def test_update_to_taken_name(self, client, admin, category):
        other = create(client, admin, "Frontend")
        response = client.put(f"/api/categories/{other['id']}", json={"name": "Backend"}, headers=admin["headers"])
        assert response.status_code == 400

    def test_update_invalid_merge(self, client, admin, category):
        response = client.put(
            f"/api/categories/{category['id']}", json={"description": "d" * 501}, headers=admin["headers"]
        )
        assert response.status_code == 400

    def test_delete(self, client, admin, category):
        response = client.delete(f"/api/categories/{category['id']}", headers=admin["headers"])
        assert response.status_code == 200
        response = client.delete(f"/api/categories/{category['id']}", headers=admin["headers"])
        assert response.status_code == 404
        assert response.json()["detail"] == "Category not found"

    @pytest.mark.parametrize("category_id", ["not-an-id", "65a000000000000000000000"])
    def test_update_unknown(self, client, admin, category_id):
        response = client.put(f"/api/categories/{category_id}", json={"name": "x"}, headers=admin["headers"])
        assert response.status_code == 404


class TestCategoryAccess:
    """Test visibility and authorization."""

    def test_public_list_hides_inactive(self, client, admin):
        create(client, admin, "Visible")
        create(client, admin, "Hidden", is_active=False)
        names = [c["name"] for c in client.get("/api/categories").json()]
        assert names == ["Visible"]
        all_names = [c["name"] for c in client.get("/api/categories/admin", headers=admin["headers"]).json()]
        assert all_names == ["Visible", "Hidden"]

    def test_create_requires_token(self, client):
        response = client.post("/api/categories", json={"name": "x", "description": "y", "icon": "z"})
        assert response.status_code == 401

    def test_create_requires_admin(self, client, user):
        response = client.post(
            "/api/categories", json={"name": "x", "description": "y", "icon": "z"}, headers=user["headers"]
        )
        assert response.status_code == 403


class TestCategoryOrdering:
    """Test reorder and move."""

    def test_reorder(self, client, admin):
        first = create(client, admin, "A")
        second = create(client, admin, "B")
        response = client.put(
            "/api/categories/admin/reorder",
            json={"categories": [{"id": first["id"], "order": 1}, {"id": second["id"], "order": 0}]},
            headers=admin["headers"],
        )
        assert response.status_code == 200
        names = [c["name"] for c in client.get("/api/categories").json()]
        assert names == ["B", "A"]

    def test_reorder_requires_list(self, client, admin):
        response = client.put("/api/categories/admin/reorder", json={"items": []}, headers=admin["headers"])
        assert response.status_code == 400

    def test_reorder_negative_order(self, client, admin, category):
        response = client.put(
            "/api/categories/admin/reorder",
            json={"categories": [{"id": category["id"], "order": -1}]},
            headers=admin["headers"],
        )
        assert response.status_code == 400

    def test_reorder_malformed_id(self, client, admin):
        response = client.put(
            "/api/categories/admin/reorder",
            json={"categories": [{"id": "nope", "order": 0}]},
            headers=admin["headers"],
        )
        assert response.status_code == 400

    def test_move_renumbers(self, client, admin):
        ids = [create(client, admin, name)["id"] for name in ("A", "B", "C")]
        response = client.post("/api/categories/admin/move", json={"id": ids[2], "to_index": 0}, headers=admin["headers"])
        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data] == ["C", "A", "B"]
        assert [c["order"] for c in data] == [0, 1, 2]
        stored = client.get("/api/categories/admin", headers=admin["headers"]).json()
        assert [c["name"] for c in stored] == ["C", "A", "B"]

    def test_move_unknown(self, client, admin, category):
        response = client.post(
            "/api/categories/admin/move",
            json={"id": "65a000000000000000000000", "to_index": 0},
            headers=admin["headers"],
        )
        assert response.status_code == 404
