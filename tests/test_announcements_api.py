"""Tests for announcements."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from notevault.models.activity import Activity
from notevault.models.announcement import Announcement
from notevault.models.audit_log import AuditLog
from tests.helpers import auth_headers


def _as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


class TestCreateAnnouncement:
    def test_defaults_pinned_for_a_day(self, client: TestClient, db, admin):
        before = datetime.now(UTC)
        resp = client.post(
            "/api/announcements",
            json={"title": "Welcome", "content": "Hello everyone"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 201
        announcement = resp.json()["announcement"]
        assert announcement["isPinned"] is True
        assert announcement["authorId"] == admin.id

        expires = _as_utc(announcement["expiresAt"])
        assert before + timedelta(hours=23, minutes=59) < expires
        assert expires < datetime.now(UTC) + timedelta(hours=24, minutes=1)
        assert db.query(Activity).filter(Activity.type == "ANNOUNCEMENT_CREATED").count() == 1

    def test_explicit_values(self, client: TestClient, admin):
        expires = datetime.now(UTC) + timedelta(days=3)
        resp = client.post(
            "/api/announcements",
            json={
                "title": "Later",
                "content": "Unpinned",
                "isPinned": False,
                "expiresAt": expires.isoformat(),
            },
            headers=auth_headers(admin),
        )
        announcement = resp.json()["announcement"]
        assert announcement["isPinned"] is False
        assert abs(_as_utc(announcement["expiresAt"]) - expires) < timedelta(seconds=1)

    def test_non_admin_forbidden_and_audited(self, client: TestClient, db, moderator):
        resp = client.post(
            "/api/announcements",
            json={"title": "Hi", "content": "x"},
            headers=auth_headers(moderator),
        )
        assert resp.status_code == 403
        db.expire_all()
        row = db.query(AuditLog).one()
        assert row.action == "UNAUTHORIZED_ACCESS_ATTEMPT"
        assert row.resource == "announcements"
        assert db.query(Announcement).count() == 0

    def test_invalid_body(self, client: TestClient, admin):
        resp = client.post(
            "/api/announcements",
            json={"title": "", "content": "x" * 2001},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 400


class TestListAnnouncements:
    def _add(self, db, author, title: str, pinned: bool, created: datetime, expires: datetime):
        db.add(
            Announcement(
                title=title,
                content="c",
                is_pinned=pinned,
                author_id=author.id,
                created_at=created,
                expires_at=expires,
            )
        )
        db.commit()

    def test_pinned_first_then_newest(self, client: TestClient, db, admin, user):
        now = datetime.now(UTC)
        later = now + timedelta(days=1)
        self._add(db, admin, "old pinned", True, now - timedelta(hours=2), later)
        self._add(db, admin, "new plain", False, now - timedelta(minutes=1), later)
        self._add(db, admin, "new pinned", True, now - timedelta(hours=1), later)
        self._add(db, admin, "expired", False, now - timedelta(hours=3), now - timedelta(hours=1))

        resp = client.get("/api/announcements", headers=auth_headers(user))
        assert resp.status_code == 200
        titles = [a["title"] for a in resp.json()["announcements"]]
        assert titles == ["new pinned", "old pinned", "new plain", "expired"]

        resp = client.get(
            "/api/announcements", params={"onlyActive": "true"}, headers=auth_headers(user)
        )
        titles = [a["title"] for a in resp.json()["announcements"]]
        assert titles == ["new pinned", "old pinned", "new plain"]

    def test_requires_auth(self, client: TestClient):
        assert client.get("/api/announcements").status_code == 401
