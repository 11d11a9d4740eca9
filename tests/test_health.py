"""
Tests for health and root endpoints, and the fallback error handler.
"""

from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.deps import get_token_settings
from main import app


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"]["status"] == "healthy"


def test_unexpected_error_returns_generic_500(db_session):
    def broken_token_settings():
        raise RuntimeError("boom")

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_token_settings] = broken_token_settings
    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post("/auth/refresh")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
