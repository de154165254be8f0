"""Tests for authentication: passwords, tokens, session resolution and auth routes."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from notevault.models.user import User, UserRole
from notevault.services.auth import (
    create_access_token,
    create_token_for_user,
    decode_access_token,
    get_user_from_token,
)
from tests.helpers import auth_headers
from tests.test_constants import TEST_PASSWORD, TEST_PASSWORD_WRONG


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_user(email: str = "admin@example.com", password: str | None = None) -> User:
    """Create a User instance with a hashed password (no DB)."""
    user = User(id="u-1", email=email)
    user.set_password(password if password is not None else TEST_PASSWORD)
    return user


# ---------------------------------------------------------------------------
# Unit tests: auth service
# ---------------------------------------------------------------------------


class TestPasswordVerification:
    def test_correct_password(self):
        user = _make_user(password=TEST_PASSWORD)
        assert user.verify_password(TEST_PASSWORD) is True

    def test_wrong_password(self):
        user = _make_user(password=TEST_PASSWORD)
        assert user.verify_password(TEST_PASSWORD_WRONG) is False


class TestAccessToken:
    def test_create_and_decode_token(self):
        token = create_access_token(data={"sub": "u-1"})
        payload = decode_access_token(token)
        assert payload is not None
        assert payload["sub"] == "u-1"
        assert "exp" in payload

    def test_invalid_token_returns_none(self):
        assert decode_access_token("not.a.valid.token") is None

    def test_tampered_token_returns_none(self):
        token = create_access_token(data={"sub": "u-1"})
        tampered = token[:-4] + "XXXX"
        assert decode_access_token(tampered) is None

    def test_expired_token_returns_none(self):
        token = create_access_token(data={"sub": "u-1"}, expires_delta=timedelta(seconds=-10))
        assert decode_access_token(token) is None


class TestSessionResolution:
    def test_resolves_active_user(self, db, user):
        resolved = get_user_from_token(db, create_token_for_user(user))
        assert resolved is not None
        assert resolved.id == user.id

    def test_unknown_user_is_unauthenticated(self, db):
        token = create_access_token(data={"sub": "missing-user"})
        assert get_user_from_token(db, token) is None

    def test_deactivated_user_is_unauthenticated(self, db, user):
        token = create_token_for_user(user)
        user.is_active = False
        db.commit()
        assert get_user_from_token(db, token) is None

    def test_role_comes_from_database_not_token(self, db, user):
        token = create_access_token(data={"sub": user.id, "role": UserRole.ADMIN.value})
        resolved = get_user_from_token(db, token)
        assert resolved.role == UserRole.USER


# ---------------------------------------------------------------------------
# API endpoints
# ---------------------------------------------------------------------------


class TestLoginEndpoint:
    def test_login_success(self, client: TestClient, user):
        resp = client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert "accessToken" in data
        assert data["tokenType"] == "bearer"
        assert "access_token" in resp.cookies

    def test_login_email_is_case_insensitive(self, client: TestClient, user):
        resp = client.post(
            "/api/auth/login",
            json={"email": "  USER@example.com ", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 200

    def test_login_wrong_password(self, client: TestClient, user):
        resp = client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": TEST_PASSWORD_WRONG},
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid email or password"}

    def test_login_unknown_user(self, client: TestClient):
        resp = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 401

    def test_login_deactivated_user(self, client: TestClient, db, user):
        user.is_active = False
        db.commit()
        resp = client.post(
            "/api/auth/login",
            json={"email": "user@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 401

    def test_login_marks_user_online(self, client: TestClient, db, user):
        client.post("/api/auth/login", json={"email": "user@example.com", "password": TEST_PASSWORD})
        db.expire_all()
        assert user.is_online is True
        assert user.last_login_at is not None

    def test_login_missing_fields_is_invalid_input(self, client: TestClient):
        resp = client.post("/api/auth/login", json={"email": "user@example.com"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid input"


class TestMeEndpoint:
    def test_me_with_bearer_token(self, client: TestClient, user):
        resp = client.get("/api/auth/me", headers=auth_headers(user))
        assert resp.status_code == 200
        data = resp.json()["user"]
        assert data["email"] == "user@example.com"
        assert data["role"] == "USER"
        assert "passwordHash" not in data

    def test_me_with_cookie(self, client: TestClient, user):
        client.cookies.set("access_token", create_token_for_user(user))
        resp = client.get("/api/auth/me")
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == user.id

    def test_me_without_token(self, client: TestClient):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

    def test_me_with_garbage_token(self, client: TestClient):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer a.b.c"})
        assert resp.status_code == 401


class TestLogoutEndpoint:
    def test_logout_clears_cookie_and_marks_offline(self, client: TestClient, db, user):
        user.is_online = True
        db.commit()
        resp = client.post("/api/auth/logout", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["message"] == "Logged out"
        db.expire_all()
        assert user.is_online is False
        assert user.last_seen is not None

    def test_logout_without_session(self, client: TestClient):
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200


class TestRegisterEndpoint:
    def test_register_creates_user_account(self, client: TestClient):
        resp = client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "secret123", "name": "New"},
        )
        assert resp.status_code == 201
        data = resp.json()["user"]
        assert data["email"] == "new@example.com"
        assert data["role"] == "USER"
        assert "access_token" in resp.cookies

    def test_register_duplicate_email(self, client: TestClient, user):
        resp = client.post(
            "/api/auth/register",
            json={"email": "user@example.com", "password": "secret123", "name": "Dup"},
        )
        assert resp.status_code == 400
        assert "already exists" in resp.json()["error"]

    def test_register_short_password(self, client: TestClient):
        resp = client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "password": "123", "name": "New"},
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid input"
