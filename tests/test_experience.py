"""
Tests for the experience manager.
"""


def experience(**extra):
    payload = {
        "company": "Acme",
        "position": "Engineer",
        "start_date": "2019-03-01T00:00:00",
        "end_date": "2021-03-01T00:00:00",
        "description": "Built things",
        "technologies": ["Python"],
    }
    payload.update(extra)
    return payload


def create(client, admin, **extra):
    response = client.post("/api/experience", json=experience(**extra), headers=admin["headers"])
    assert response.status_code == 201, response.json()
    return response.json()


class TestExperience:
    """Test experience CRUD."""

    def test_create(self, client, admin):
        data = create(client, admin)
        assert data["company"] == "Acme"
        assert data["current"] is False
        assert data["start_date"].startswith("2019-03-01")

    def test_current_role_needs_no_end_date(self, client, admin):
        data = create(client, admin, end_date=None, current=True)
        assert data["end_date"] is None

    def test_past_role_needs_end_date(self, client, admin):
        response = client.post("/api/experience", json=experience(end_date=None), headers=admin["headers"])
        assert response.status_code == 400
        assert response.json()["detail"] == "Please provide an end date for past experiences"

    def test_missing_company(self, client, admin):
        payload = experience()
        del payload["company"]
        response = client.post("/api/experience", json=payload, headers=admin["headers"])
        assert response.status_code == 400

    def test_requires_admin(self, client, user):
        response = client.post("/api/experience", json=experience(), headers=user["headers"])
        assert response.status_code == 403

    def test_update(self, client, admin):
        item = create(client, admin)
        response = client.put(
            f"/api/experience/{item['id']}", json={"position": "Lead Engineer"}, headers=admin["headers"]
        )
        assert response.status_code == 200
        assert response.json()["position"] == "Lead Engineer"
        assert response.json()["company"] == "Acme"

    def test_update_clearing_current_requires_end_date(self, client, admin):
        item = create(client, admin, end_date=None, current=True)
        response = client.put(f"/api/experience/{item['id']}", json={"current": False}, headers=admin["headers"])
        assert response.status_code == 400

    def test_delete(self, client, admin):
        item = create(client, admin)
        response = client.delete(f"/api/experience/{item['id']}", headers=admin["headers"])
        assert response.status_code == 200
        assert response.json()["message"] == "Experience deleted"
        assert client.get("/api/experience").json() == []

    def test_public_list_hides_inactive(self, client, admin):
        create(client, admin, company="Shown", order=0)
        create(client, admin, company="Hidden", order=1, is_active=False)
        assert [e["company"] for e in client.get("/api/experience").json()] == ["Shown"]
        assert len(client.get("/api/experience/admin", headers=admin["headers"]).json()) == 2

    def test_reorder(self, client, admin):
        a = create(client, admin, company="A", order=0)
        b = create(client, admin, company="B", order=1)
        response = client.put(
            "/api/experience/reorder",
            json={"experiences": [{"id": a["id"], "order": 1}, {"id": b["id"], "order": 0}]},
            headers=admin["headers"],
        )
        assert response.status_code == 200
        assert [e["company"] for e in client.get("/api/experience").json()] == ["B", "A"]

    def test_move(self, client, admin):
        ids = [create(client, admin, company=c, order=i)["id"] for i, c in enumerate("ABC")]
        response = client.post("/api/experience/admin/move", json={"id": ids[2], "to_index": 1}, headers=admin["headers"])
        assert response.status_code == 200
        assert [e["company"] for e in response.json()] == ["A", "C", "B"]
