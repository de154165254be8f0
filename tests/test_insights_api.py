"""Tests for AI insight generation and management."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from notevault.models.activity import Activity
from notevault.models.ai_insight import AIInsight, InsightType
from notevault.models.note import Note
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import MemberRole, WorkspaceMember
from tests.helpers import auth_headers

LONG_CONTENT = (
    "Quarterly planning starts Monday. The roadmap covers search and sync. "
    "Search ranking needs better relevance. Sync must handle offline edits."
)


def _note(db, author, title: str, content: str = LONG_CONTENT, **kwargs) -> Note:
    note = Note(title=title, content=content, author_id=author.id, **kwargs)
    db.add(note)
    db.commit()
    return note


def _insight(db, owner, title: str, **kwargs) -> AIInsight:
    insight = AIInsight(
        type=kwargs.pop("type", InsightType.SUMMARY),
        title=title,
        content="c",
        user_id=owner.id,
        **kwargs,
    )
    db.add(insight)
    db.commit()
    return insight


class TestGenerate:
    def test_own_notes(self, client: TestClient, db, user):
        _note(db, user, "Planning")
        _note(db, user, "Tiny", content="short")

        resp = client.post("/api/ai/generate-insights", json={}, headers=auth_headers(user))
        assert resp.status_code == 200
        data = resp.json()
        types = [i["type"] for i in data["insights"]]
        assert types.count("SUMMARY") == 1
        summary = next(i for i in data["insights"] if i["type"] == "SUMMARY")
        assert summary["title"] == 'Summary for "Planning"'
        assert summary["metadata"]["key_points"]
        assert summary["userId"] == user.id
        assert summary["isRead"] is False

        stored = db.query(AIInsight).count()
        assert stored == len(data["insights"])
        activity = db.query(Activity).filter(Activity.title == "AI insights generated").one()
        assert activity.metadata_["insights_count"] == stored
        assert activity.metadata_["suggestions_count"] == len(data["suggestions"])

    def test_single_note_improvements(self, client: TestClient, db, user):
        note = _note(db, user, "ab", content="brief")
        resp = client.post(
            "/api/ai/generate-insights", json={"noteId": note.id}, headers=auth_headers(user)
        )
        assert resp.status_code == 200
        improvements = [i for i in resp.json()["insights"] if i["type"] == "IMPROVEMENT"]
        assert {i["title"] for i in improvements} == {"Expand content", "Add descriptive title"}
        assert all(i["noteId"] == note.id for i in improvements)

    def test_duplicates_detected(self, client: TestClient, db, user):
        _note(db, user, "First")
        _note(db, user, "Second")
        resp = client.post("/api/ai/generate-insights", json={}, headers=auth_headers(user))
        duplicates = [i for i in resp.json()["insights"] if i["type"] == "DUPLICATE"]
        assert len(duplicates) == 1
        assert duplicates[0]["metadata"]["items"] == ["Second"]

    def test_workspace_scope_requires_read(self, client: TestClient, db, user, other_user):
        ws = Workspace(name="Private", owner_id=other_user.id)
        db.add(ws)
        db.commit()
        _note(db, other_user, "Inside", workspace_id=ws.id)
        resp = client.post(
            "/api/ai/generate-insights", json={"workspaceId": ws.id}, headers=auth_headers(user)
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Workspace not found"}

    def test_workspace_member_scope(self, client: TestClient, db, user, other_user):
        ws = Workspace(name="Shared", owner_id=other_user.id)
        db.add(ws)
        db.flush()
        db.add(WorkspaceMember(workspace_id=ws.id, user_id=user.id, role=MemberRole.MEMBER))
        db.commit()
        _note(db, other_user, "Inside", workspace_id=ws.id)
        resp = client.post(
            "/api/ai/generate-insights", json={"workspaceId": ws.id}, headers=auth_headers(user)
        )
        assert resp.status_code == 200
        assert all(i["workspaceId"] == ws.id for i in resp.json()["insights"])

    def test_no_notes(self, client: TestClient, user):
        resp = client.post("/api/ai/generate-insights", json={}, headers=auth_headers(user))
        assert resp.status_code == 404
        assert resp.json() == {"error": "No notes found"}

    def test_private_note_of_someone_else(self, client: TestClient, db, user, other_user):
        note = _note(db, other_user, "Hidden", is_public=False)
        resp = client.post(
            "/api/ai/generate-insights", json={"noteId": note.id}, headers=auth_headers(user)
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Note not found"}

    def test_trashed_notes_ignored(self, client: TestClient, db, user):
        _note(db, user, "Gone", is_deleted=True, deleted_at=datetime.now(UTC))
        resp = client.post("/api/ai/generate-insights", json={}, headers=auth_headers(user))
        assert resp.status_code == 404

    def test_misconfigured_engine(self, client: TestClient, db, user):
        _note(db, user, "Planning")
        with patch(
            "notevault.api.insights.get_insight_engine",
            side_effect=ValueError("LLM_API_KEY is required"),
        ):
            resp = client.post("/api/ai/generate-insights", json={}, headers=auth_headers(user))
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to generate insights"}
        assert db.query(AIInsight).count() == 0


class TestManageInsights:
    def test_list_own_newest_first(self, client: TestClient, db, user, other_user):
        now = datetime.now(UTC)
        _insight(db, user, "older", created_at=now - timedelta(minutes=5))
        _insight(db, user, "newer", created_at=now)
        _insight(db, other_user, "theirs")

        resp = client.get("/api/ai/insights", headers=auth_headers(user))
        assert resp.status_code == 200
        assert [i["title"] for i in resp.json()["insights"]] == ["newer", "older"]

    def test_list_filters_by_note_and_embeds_it(self, client: TestClient, db, user):
        note = _note(db, user, "Planning")
        _insight(db, user, "about note", note_id=note.id)
        _insight(db, user, "general")

        resp = client.get(
            "/api/ai/insights", params={"noteId": note.id}, headers=auth_headers(user)
        )
        insights = resp.json()["insights"]
        assert [i["title"] for i in insights] == ["about note"]
        assert insights[0]["note"] == {"id": note.id, "title": "Planning"}

    def test_mark_read(self, client: TestClient, db, user):
        insight = _insight(db, user, "x")
        resp = client.post(f"/api/ai/insights/{insight.id}/read", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["insight"]["isRead"] is True

    @pytest.mark.parametrize("method,suffix", [("post", "/read"), ("delete", "")])
    def test_other_users_insight_is_not_found(
        self, client: TestClient, db, user, other_user, method, suffix
    ):
        insight = _insight(db, other_user, "theirs")
        resp = getattr(client, method)(
            f"/api/ai/insights/{insight.id}{suffix}", headers=auth_headers(user)
        )
        assert resp.status_code == 404
        assert resp.json() == {"error": "Insight not found"}

    def test_delete(self, client: TestClient, db, user):
        insight = _insight(db, user, "x")
        resp = client.delete(f"/api/ai/insights/{insight.id}", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Insight deleted"}
        db.expire_all()
        assert db.query(AIInsight).count() == 0
