"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Registered users and their auth headers
"""

import os

# Settings are read at import time, so the signing secrets and a cheap
# bcrypt cost must be in place before the app is imported
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import TokenSettings, settings
from app.core.cookies import REFRESH_COOKIE_NAME
from app.core.database import Base, get_db
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def token_settings():
    return TokenSettings.from_settings(settings)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.

    Entered as a context manager so the lifespan runs and the token
    settings are loaded onto app.state.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def user_data():
    return {
        "username": "jdoe",
        "email": "jdoe@example.com",
        "password": "pw123",
    }


@pytest.fixture
def registered_user(client, user_data):
    """
    Register a user and return its access and refresh tokens.
    """
    response = client.post("/auth/register", json=user_data)
    assert response.status_code == 201
    return {
        "access_token": response.json()["accessToken"],
        "refresh_token": response.cookies[REFRESH_COOKIE_NAME],
    }


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['access_token']}"}


@pytest.fixture
def use_refresh_cookie(client):
    """
    Make the client present exactly the given refresh token on its next call.
    """
    def _use(refresh_token: str) -> None:
        client.cookies.clear()
        client.cookies.set(REFRESH_COOKIE_NAME, refresh_token)

    return _use
