# tests/test_main.py
import pytest
from fastapi.testclient import TestClient

from asset_admin.db.session import get_db
from asset_admin.main import app


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # Startup hook not run: no context manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["project_name"] == "Asset Admin"
    assert data["docs_url"] == "/api/v1/docs"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"


def test_security_headers(client):
    response = client.get("/")
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"


def test_routes_are_mounted_under_api_prefix(client):
    response = client.get("/api/v1/labels/settings")
    assert response.status_code == 401

