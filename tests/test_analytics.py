"""
Tests for visitor analytics tracking and the admin summary.
"""

from datetime import datetime, timedelta

import database
from routes.analytics import range_start


def track(client, **event):
    payload = {"type": "pageView", "visitor_id": "v1", "path": "/", **event}
    return client.post("/api/analytics", json=payload)


class TestTrackEvent:
    """Test the public tracking endpoint."""

    def test_track_page_view(self, client):
        response = track(client, country="Germany")
        assert response.status_code == 201
        stored = database.get_collection("analytics").find_one({})
        assert stored["country"] == "Germany"
        assert stored["is_admin"] is False
        assert stored["ip"]
        assert stored["user_agent"]

    def test_client_cannot_claim_admin(self, client):
        track(client, is_admin=True)
        assert database.get_collection("analytics").find_one({})["is_admin"] is False

    def test_admin_activity_not_tracked(self, client, admin):
        response = track(client, user_id=admin["id"])
        assert response.status_code == 200
        assert response.json()["message"] == "Admin activity not tracked"
        assert database.get_collection("analytics").count_documents({}) == 0

    def test_regular_user_tracked(self, client, user):
        assert track(client, user_id=user["id"]).status_code == 201

    def test_unknown_type_rejected(self, client):
        assert track(client, type="click").status_code == 400


class TestSummary:
    """Test the admin analytics summary."""

    def seed(self, client):
        project_id = database.create_document("project", {"title": "Portfolio"})
        track(client, visitor_id="v1", path="/", country="Germany", time_spent=10)
        track(client, visitor_id="v1", path="/projects", country="Germany", time_spent=20)
        track(client, visitor_id="v2", path="/admin/dashboard", country="France")
        track(client, type="contactSubmission", visitor_id="v2", path="/contact", country="France")
        track(client, type="resumeDownload", visitor_id="v1", path="/about", country="Germany")
        track(client, type="projectView", visitor_id="v2", path="/projects", country="Germany", metadata={"project_id": project_id})

    def test_summary(self, client, admin):
        self.seed(client)
        response = client.get("/api/analytics", params={"time_range": "week"}, headers=admin["headers"])
        assert response.status_code == 200
        data = response.json()
        assert data["unique_visitors"] == 2
        assert data["page_views"] == 2
        assert data["contact_submissions"] == 1
        assert data["resume_downloads"] == 1
        assert data["top_locations"] == [{"country": "Germany", "count": 4}, {"country": "France", "count": 2}]
        assert data["top_projects"] == [{"title": "Portfolio", "views": 1}]
        assert data["top_skills"] == []
        assert data["time_spent"] == {"average": 15, "total": 30}

    def test_time_range_excludes_old_events(self, client, admin):
        database.get_collection("analytics").insert_one(
            {
                "type": "pageView",
                "visitor_id": "old",
                "path": "/",
                "is_admin": False,
                "country": "Spain",
                "time_spent": 0,
                "created_at": datetime.utcnow() - timedelta(days=10),
            }
        )
        week = client.get("/api/analytics", params={"time_range": "week"}, headers=admin["headers"]).json()
        month = client.get("/api/analytics", params={"time_range": "month"}, headers=admin["headers"]).json()
        assert week["page_views"] == 0
        assert month["page_views"] == 1

    def test_empty_summary(self, client, admin):
        data = client.get("/api/analytics", headers=admin["headers"]).json()
        assert data["unique_visitors"] == 0
        assert data["time_spent"] == {"average": 0, "total": 0}

    def test_requires_admin(self, client, user):
        assert client.get("/api/analytics").status_code == 401
        assert client.get("/api/analytics", headers=user["headers"]).status_code == 403


class TestRangeStart:
    """Test time range windows."""

    def test_windows(self):
        now = datetime(2024, 6, 30)
        assert range_start("day", now) == datetime(2024, 6, 29)
        assert range_start("week", now) == datetime(2024, 6, 23)
        assert range_start("month", now) == datetime(2024, 5, 31)
        assert range_start("year", now) == datetime(2023, 7, 1)

    def test_unknown_range_defaults_to_week(self):
        now = datetime(2024, 6, 30)
        assert range_start("decade", now) == range_start("week", now)
