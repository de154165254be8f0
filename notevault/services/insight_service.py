"""AI insights: generate from notes, list, mark read, delete."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notevault.ai.engine import InsightEngine, Suggestion
from notevault.models.ai_insight import AIInsight, InsightType
from notevault.models.note import Note
from notevault.schemas.audit import InsightsGeneratedActivity
from notevault.services import activity as activity_log
from notevault.services.access_control import Principal, WorkspaceAction, authorize_workspace
from notevault.services.note_service import NoteNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10


class InsightNotFoundError(LookupError):
    """Insight is absent or belongs to another user."""


class NoNotesForInsightsError(LookupError):
    """Nothing to analyse."""


def _notes_for_analysis(
    db: Session, principal: Principal, workspace_id: str | None, note_id: str | None
) -> list[Note]:
    live = db.query(Note).filter(Note.is_deleted == False)  # noqa: E712
    if workspace_id is not None:
        authorize_workspace(db, principal, workspace_id, WorkspaceAction.READ)
        live = live.filter(Note.workspace_id == workspace_id)

    if note_id is not None:
        note = live.filter(Note.id == note_id).first()
        if note is None:
            raise NoteNotFoundError("Note not found")
        if workspace_id is None:
            if note.workspace_id is not None:
                authorize_workspace(db, principal, note.workspace_id, WorkspaceAction.READ)
            elif not note.is_public and note.author_id != principal.user_id:
                raise NoteNotFoundError("Note not found")
        return [note]

    if workspace_id is None:
        live = live.filter(Note.author_id == principal.user_id)
    return live.order_by(Note.created_at).all()


def generate_insights(
    db: Session,
    principal: Principal,
    engine: InsightEngine,
    workspace_id: str | None = None,
    note_id: str | None = None,
) -> tuple[list[AIInsight], list[Suggestion]]:
    """Run the engine over the selected notes and store what it finds.

    Stores a SUMMARY per note whose summary differs from its content, an
    IMPROVEMENT per improvement suggestion for the focus note, and a
    DUPLICATE or PATTERN per detected pattern.
    """
    notes = _notes_for_analysis(db, principal, workspace_id, note_id)
    if not notes:
        raise NoNotesForInsightsError("No notes found")

    insights: list[AIInsight] = []

    def store(type_: InsightType, title: str, content: str, confidence: float, **extra) -> None:
        insight = AIInsight(
            type=type_,
            title=title[:255],
            content=content,
            confidence=confidence,
            user_id=principal.user_id,
            workspace_id=workspace_id,
            **extra,
        )
        db.add(insight)
        insights.append(insight)

    for note in notes:
        summary = engine.summarize_text(note.content)
        if summary.summary != note.content:
            store(
                InsightType.SUMMARY,
                f'Summary for "{note.title}"',
                summary.summary,
                summary.confidence,
                note_id=note.id,
                metadata_={"key_points": summary.key_points},
            )

    current = notes[0]
    suggestions = engine.generate_suggestions(notes, current)
    for suggestion in suggestions:
        if suggestion.type == "improvement":
            store(
                InsightType.IMPROVEMENT,
                suggestion.title,
                suggestion.description,
                suggestion.confidence,
                note_id=current.id,
                metadata_={"suggestion_type": suggestion.type},
            )

    for pattern in engine.find_patterns(notes):
        shown = ", ".join(pattern.items[:3])
        more = "..." if len(pattern.items) > 3 else ""
        store(
            InsightType.DUPLICATE if pattern.type == "duplicate" else InsightType.PATTERN,
            f"Pattern: {pattern.description}",
            f"Found {len(pattern.items)} items: {shown}{more}",
            pattern.confidence,
            metadata_={"items": pattern.items, "pattern_type": pattern.type},
        )

    activity_log.add_activity(
        db,
        type=activity_log.NOTE_UPDATED,
        title="AI insights generated",
        description=f"Generated {len(insights)} insights and {len(suggestions)} suggestions",
        user_id=principal.user_id,
        workspace_id=workspace_id,
        metadata=InsightsGeneratedActivity(
            insights_count=len(insights), suggestions_count=len(suggestions)
        ),
    )
    db.commit()
    for insight in insights:
        db.refresh(insight)
    logger.info(
        "Generated %d insights for user %s using %s engine",
        len(insights),
        principal.user_id,
        engine.name,
    )
    return insights, suggestions


def list_insights(
    db: Session,
    user_id: str,
    workspace_id: str | None = None,
    note_id: str | None = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[AIInsight]:
    """The caller's own insights, newest first."""
    query = db.query(AIInsight).filter(AIInsight.user_id == user_id)
    if workspace_id is not None:
        query = query.filter(AIInsight.workspace_id == workspace_id)
    if note_id is not None:
        query = query.filter(AIInsight.note_id == note_id)
    return query.order_by(AIInsight.created_at.desc()).limit(limit).all()


def _owned_insight(db: Session, user_id: str, insight_id: str) -> AIInsight:
    insight = db.get(AIInsight, insight_id)
    if insight is None or insight.user_id != user_id:
        raise InsightNotFoundError("Insight not found")
    return insight


def mark_insight_read(db: Session, user_id: str, insight_id: str) -> AIInsight:
    insight = _owned_insight(db, user_id, insight_id)
    insight.is_read = True
    db.commit()
    db.refresh(insight)
    return insight


def delete_insight(db: Session, user_id: str, insight_id: str) -> None:
    insight = _owned_insight(db, user_id, insight_id)
    db.delete(insight)
    db.commit()
