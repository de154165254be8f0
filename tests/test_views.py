"""Tests for the HTML pages: login, logout, setup, dashboard."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from notevault.models.announcement import Announcement
from notevault.models.audit_log import AuditLog
from notevault.models.user import User, UserRole
from tests.test_constants import TEST_PASSWORD, TEST_PASSWORD_WRONG


class TestLoginPages:
    def test_login_form(self, client: TestClient, admin):
        resp = client.get("/login")
        assert resp.status_code == 200
        assert "Sign in" in resp.text

    def test_dashboard_redirects_anonymous_to_login(self, client: TestClient, admin):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"

    def test_login_sets_cookie_and_opens_dashboard(self, client: TestClient, db, admin, user):
        db.add(
            Announcement(
                title="Heads up",
                content="Release on Friday",
                author_id=admin.id,
                expires_at=datetime.now(UTC) + timedelta(hours=1),
            )
        )
        db.commit()

        resp = client.post(
            "/login",
            data={"email": "user@example.com", "password": TEST_PASSWORD},
            follow_redirects=False,
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/"
        assert "access_token" in resp.cookies

        page = client.get("/")
        assert page.status_code == 200
        assert "Welcome back" in page.text
        assert "Heads up" in page.text

    def test_bad_credentials_rerender_form(self, client: TestClient, admin, user):
        resp = client.post(
            "/login", data={"email": "user@example.com", "password": TEST_PASSWORD_WRONG}
        )
        assert resp.status_code == 401
        assert "Invalid email or password" in resp.text
        assert 'value="user@example.com"' in resp.text

    def test_logout_clears_cookie(self, client: TestClient, admin, user):
        client.post("/login", data={"email": "user@example.com", "password": TEST_PASSWORD})
        resp = client.get("/logout", follow_redirects=False)
        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"
        assert client.get("/", follow_redirects=False).headers["location"] == "/login"


class TestSetupPage:
    def test_form_creates_admin_and_signs_in(self, client: TestClient, db):
        resp = client.post(
            "/setup",
            data={"name": "Root", "email": "root@example.com", "password": "secret123"},
            follow_redirects=False,
        )
        assert resp.status_code == 303
        assert resp.headers["location"] == "/"
        assert "access_token" in resp.cookies

        db.expire_all()
        admin = db.query(User).filter(User.email == "root@example.com").one()
        assert admin.role == UserRole.ADMIN
        assert db.query(AuditLog).filter(AuditLog.action == "INITIAL_ADMIN_CREATED").count() == 1
        assert client.get("/").status_code == 200

    def test_invalid_form_shows_errors(self, client: TestClient, db):
        resp = client.post(
            "/setup", data={"name": "Root", "email": "not-an-email", "password": "123"}
        )
        assert resp.status_code == 400
        assert 'class="error"' in resp.text
        assert db.query(User).count() == 0

    def test_email_taken_shows_error(self, client: TestClient, user):
        resp = client.post(
            "/setup",
            data={"name": "Root", "email": "user@example.com", "password": "secret123"},
        )
        assert resp.status_code == 400
        assert 'class="error"' in resp.text
