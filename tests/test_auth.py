"""
Tests for the authentication endpoints.

Tests:
- User registration
- Login
- Refresh token rotation and reuse detection
- Logout
- Misconfigured signing secrets
"""

from datetime import timedelta

from app.core.cookies import REFRESH_COOKIE_NAME
from app.core.security import create_refresh_token, generate_jti
from app.models.refresh_token import RefreshToken


class TestUserRegistration:
    """Test user registration endpoint"""

    def test_register_success(self, client, user_data, db_session):
        response = client.post("/auth/register", json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert "accessToken" in data
        assert "refreshToken" not in data
        assert response.cookies.get(REFRESH_COOKIE_NAME)

        # Registration opens the first session
        assert db_session.query(RefreshToken).count() == 1

    def test_register_sets_http_only_cookie(self, client, user_data):
        response = client.post("/auth/register", json=user_data)

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{REFRESH_COOKIE_NAME}=")
        assert "HttpOnly" in set_cookie
        assert "Path=/auth/" in set_cookie
        assert "Max-Age=604800" in set_cookie
        assert "samesite=lax" in set_cookie.lower()

    def test_register_duplicate_email(self, client, user_data):
        client.post("/auth/register", json=user_data)

        response = client.post(
            "/auth/register",
            json={**user_data, "username": "someone-else"}
        )

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"].lower()

    def test_register_duplicate_username(self, client, user_data):
        client.post("/auth/register", json=user_data)

        response = client.post(
            "/auth/register",
            json={**user_data, "email": "other@example.com"}
        )

        assert response.status_code == 400

    def test_register_missing_fields(self, client):
        response = client.post("/auth/register", json={"email": "a@example.com"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid request body"

    def test_register_invalid_email(self, client, user_data):
        response = client.post("/auth/register", json={**user_data, "email": "not-an-email"})

        assert response.status_code == 400

    def test_password_is_not_stored_in_clear(self, client, user_data, db_session):
        from app.models.user import User

        client.post("/auth/register", json=user_data)

        user = db_session.query(User).filter(User.email == user_data["email"]).first()
        assert user.hashed_password != user_data["password"]

    def test_session_write_failure_keeps_user(self, client, user_data, db_session, monkeypatch):
        from sqlalchemy.exc import OperationalError

        from app.models.user import User

        def failing_create(*args, **kwargs):
            raise OperationalError("INSERT INTO refresh_tokens", {}, Exception("database unavailable"))

        monkeypatch.setattr("app.crud.refresh_token.create", failing_create)

        response = client.post("/auth/register", json=user_data)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
        # The user row was committed before the session write and is not rolled back
        assert db_session.query(User).count() == 1
        assert db_session.query(RefreshToken).count() == 0


class TestUserLogin:
    """Test login endpoint"""

    def test_login_success(self, client, user_data, registered_user):
        response = client.post(
            "/auth/login",
            json={"email": user_data["email"], "password": user_data["password"]}
        )

        assert response.status_code == 200
        assert "accessToken" in response.json()
        assert response.cookies.get(REFRESH_COOKIE_NAME)

    def test_login_invalidates_previous_refresh_token(self, client, user_data, registered_user, use_refresh_cookie):
        client.post(
            "/auth/login",
            json={"email": user_data["email"], "password": user_data["password"]}
        )

        use_refresh_cookie(registered_user["refresh_token"])
        response = client.post("/auth/refresh")

        assert response.status_code == 403

    def test_login_wrong_password(self, client, user_data, registered_user):
        response = client.post(
            "/auth/login",
            json={"email": user_data["email"], "password": "wrong"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Email or password are incorrect"

    def test_login_unknown_email_same_message(self, client, registered_user):
        response = client.post(
            "/auth/login",
            json={"email": "nobody@example.com", "password": "pw123"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Email or password are incorrect"

    def test_repeated_logins_keep_single_session(self, client, user_data, registered_user, db_session):
        for _ in range(3):
            response = client.post(
                "/auth/login",
                json={"email": user_data["email"], "password": user_data["password"]}
            )
            assert response.status_code == 200

        assert db_session.query(RefreshToken).count() == 1


class TestTokenRefresh:
    """Test refresh token rotation"""

    def test_refresh_success(self, client, registered_user):
        # The registration cookie is still in the client's jar
        response = client.post("/auth/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["accessToken"]
        assert data["refreshToken"]
        assert data["refreshToken"] != registered_user["refresh_token"]
        # The new refresh token replaces the cookie
        assert response.cookies[REFRESH_COOKIE_NAME] == data["refreshToken"]

    def test_refresh_access_token_works(self, client, registered_user):
        new_access = client.post("/auth/refresh").json()["accessToken"]

        response = client.get("/users/me", headers={"Authorization": f"Bearer {new_access}"})

        assert response.status_code == 200

    def test_refresh_token_is_single_use(self, client, registered_user, use_refresh_cookie):
        first = client.post("/auth/refresh")
        assert first.status_code == 200

        use_refresh_cookie(registered_user["refresh_token"])
        replay = client.post("/auth/refresh")

        assert replay.status_code == 403

        # The rotated token is still the valid one
        use_refresh_cookie(first.json()["refreshToken"])
        assert client.post("/auth/refresh").status_code == 200

    def test_refresh_chain(self, client, registered_user, use_refresh_cookie):
        token = registered_user["refresh_token"]
        for _ in range(3):
            use_refresh_cookie(token)
            response = client.post("/auth/refresh")
            assert response.status_code == 200
            token = response.json()["refreshToken"]

    def test_refresh_without_cookie(self, client):
        response = client.post("/auth/refresh")

        assert response.status_code == 401
        assert response.json()["detail"] == "The refresh token is not valid"

    def test_refresh_with_garbage_token(self, client, use_refresh_cookie):
        use_refresh_cookie("not-a-jwt")

        response = client.post("/auth/refresh")

        assert response.status_code == 401

    def test_refresh_with_access_token(self, client, registered_user, use_refresh_cookie):
        # Signed with the access secret, so it is not a refresh token
        use_refresh_cookie(registered_user["access_token"])

        response = client.post("/auth/refresh")

        assert response.status_code == 401

    def test_refresh_with_expired_token(self, client, registered_user, token_settings, use_refresh_cookie):
        from jose import jwt

        user_id = jwt.get_unverified_claims(registered_user["refresh_token"])["sub"]
        expired = create_refresh_token(
            user_id,
            generate_jti(),
            token_settings.refresh_secret,
            expires_delta=timedelta(seconds=-10),
        )
        use_refresh_cookie(expired)

        response = client.post("/auth/refresh")

        assert response.status_code == 401

    def test_refresh_for_user_without_session(self, client, token_settings, use_refresh_cookie):
        token = create_refresh_token("no-such-user", generate_jti(), token_settings.refresh_secret)
        use_refresh_cookie(token)

        response = client.post("/auth/refresh")

        assert response.status_code == 403

    def test_refresh_with_jti_mismatch(self, client, registered_user, db_session):
        # Hash still matches the presented token, only the stored jti differs
        record = db_session.query(RefreshToken).one()
        record.jti = "some-other-jti"
        db_session.commit()

        response = client.post("/auth/refresh")

        assert response.status_code == 403
        assert response.json()["detail"] == "The refresh token is not valid"


class TestRefreshCookie:
    """Test refresh cookie attributes"""

    def test_max_age_follows_refresh_lifetime(self):
        from starlette.responses import Response

        from app.core.config import Settings
        from app.core.cookies import set_refresh_cookie

        response = Response()
        set_refresh_cookie(response, "token", Settings(REFRESH_TOKEN_EXPIRE_DAYS=1))

        assert "Max-Age=86400" in response.headers["set-cookie"]


class TestLogout:
    """Test logout endpoint"""

    def test_logout_success(self, client, registered_user, db_session):
        response = client.post("/auth/logout")

        assert response.status_code == 204
        assert response.content == b""
        assert db_session.query(RefreshToken).count() == 0

        # Cookie is cleared on the same path it was set on
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{REFRESH_COOKIE_NAME}=")
        assert "Path=/auth/" in set_cookie
        assert client.cookies.get(REFRESH_COOKIE_NAME) is None

    def test_refresh_after_logout(self, client, registered_user, use_refresh_cookie):
        client.post("/auth/logout")

        use_refresh_cookie(registered_user["refresh_token"])
        response = client.post("/auth/refresh")

        assert response.status_code == 403

    def test_logout_without_cookie(self, client):
        response = client.post("/auth/logout")

        assert response.status_code == 400

    def test_logout_twice(self, client, registered_user, use_refresh_cookie):
        assert client.post("/auth/logout").status_code == 204

        use_refresh_cookie(registered_user["refresh_token"])
        response = client.post("/auth/logout")

        assert response.status_code == 404

    def test_logout_with_badly_signed_token(self, client, registered_user, use_refresh_cookie):
        use_refresh_cookie(registered_user["access_token"])

        response = client.post("/auth/logout")

        assert response.status_code == 401

    def test_logout_accepts_expired_token(self, client, registered_user, token_settings, use_refresh_cookie):
        from jose import jwt

        user_id = jwt.get_unverified_claims(registered_user["refresh_token"])["sub"]
        expired = create_refresh_token(
            user_id,
            generate_jti(),
            token_settings.refresh_secret,
            expires_delta=timedelta(seconds=-10),
        )
        use_refresh_cookie(expired)

        response = client.post("/auth/logout")

        assert response.status_code == 204

    def test_access_token_survives_logout(self, client, registered_user, auth_headers):
        # Access tokens are stateless and stay valid until they expire
        client.post("/auth/logout")

        response = client.get("/users/me", headers=auth_headers)

        assert response.status_code == 200


class TestMisconfiguration:
    """Auth routes fail with 500 when the signing secrets are unusable"""

    def test_login_when_secrets_missing(self, client, user_data):
        client.app.state.token_settings = None

        response = client.post(
            "/auth/login",
            json={"email": user_data["email"], "password": user_data["password"]}
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Server misconfigured"

    def test_register_creates_nothing_when_misconfigured(self, client, user_data, db_session):
        from app.models.user import User

        client.app.state.token_settings = None

        response = client.post("/auth/register", json=user_data)

        assert response.status_code == 500
        assert db_session.query(User).count() == 0

    def test_protected_route_when_secrets_missing(self, client):
        client.app.state.token_settings = None

        response = client.get("/users/me", headers={"Authorization": "Bearer whatever"})

        assert response.status_code == 500

    def test_health_does_not_need_secrets(self, client):
        client.app.state.token_settings = None

        assert client.get("/health").status_code == 200
