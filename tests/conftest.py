# Test configuration
import os
import sys
import tempfile
from pathlib import Path

# Project root on sys.path so the flat modules import without installing
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Set test environment variables BEFORE importing app modules
os.environ.pop("DATABASE_URL", None)
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["ADMIN_EMAIL"] = "owner@example.com"
os.environ["ADMIN_PASSWORD"] = "Owner123"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="portfolio-uploads-")
os.environ["RESEND_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import mongomock  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import config  # noqa: E402
import database  # noqa: E402
from main import app  # noqa: E402
from schemas import User  # noqa: E402
from security import create_access_token, hash_password  # noqa: E402

PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def mongo(monkeypatch, tmp_path):
    """Fresh in-memory database and uploads directory for every test."""
    db = mongomock.MongoClient()["portfolio_test"]
    monkeypatch.setattr(database, "db", db)
    database.ensure_indexes()
    monkeypatch.setattr(config, "UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(config, "RESEND_API_KEY", None)
    yield db


@pytest.fixture
def client():
    return TestClient(app)


def make_user(name="Test User", email="user@example.com", is_admin=False, password=PASSWORD):
    user_id = database.create_document(
        "user",
        User(name=name, email=email, password_hash=hash_password(password), is_admin=is_admin),
    )
    token = create_access_token(user_id)
    return {"id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def admin():
    return make_user(name="Site Owner", email="admin@example.com", is_admin=True)


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def category(client, admin):
    response = client.post(
        "/api/categories",
        json={"name": "Backend", "description": "Server side work", "icon": "server"},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    return response.json()


def uploaded_files(subdir):
    path = Path(config.UPLOADS_DIR) / subdir
    if not path.is_dir():
        return []
    return sorted(p.name for p in path.iterdir())
