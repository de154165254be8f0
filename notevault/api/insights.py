"""AI insight API routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from notevault.ai.router import get_insight_engine
from notevault.api.deps import get_db, get_principal
from notevault.schemas.insight import (
    GenerateInsightsRequest,
    GenerateInsightsResponse,
    InsightDetail,
    InsightEnvelope,
    InsightList,
    InsightRead,
    SuggestionRead,
)
from notevault.services import insight_service
from notevault.services.access_control import Principal
from notevault.services.note_service import NoteNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/insights", response_model=InsightList)
def list_insights(
    workspace_id: str | None = Query(None, alias="workspaceId"),
    note_id: str | None = Query(None, alias="noteId"),
    limit: int = Query(insight_service.DEFAULT_LIST_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> InsightList:
    insights = insight_service.list_insights(
        db, principal.user_id, workspace_id=workspace_id, note_id=note_id, limit=limit
    )
    return InsightList(insights=[InsightDetail.model_validate(i) for i in insights])


@router.post("/generate-insights", response_model=GenerateInsightsResponse)
def generate_insights(
    body: GenerateInsightsRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> GenerateInsightsResponse:
    """Analyse a note, a workspace, or the caller's own notes."""
    try:
        engine = get_insight_engine()
    except ValueError:
        logger.exception("Insight engine misconfigured")
        raise HTTPException(status_code=500, detail="Failed to generate insights")
    try:
        insights, suggestions = insight_service.generate_insights(
            db, principal, engine, workspace_id=body.workspace_id, note_id=body.note_id
        )
    except (insight_service.NoNotesForInsightsError, NoteNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return GenerateInsightsResponse(
        insights=[InsightRead.model_validate(i) for i in insights],
        suggestions=[
            SuggestionRead(
                type=s.type, title=s.title, description=s.description, confidence=s.confidence
            )
            for s in suggestions
        ],
    )


@router.post("/insights/{insight_id}/read", response_model=InsightEnvelope)
def mark_read(
    insight_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> InsightEnvelope:
    try:
        insight = insight_service.mark_insight_read(db, principal.user_id, insight_id)
    except insight_service.InsightNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return InsightEnvelope(insight=InsightRead.model_validate(insight))


@router.delete("/insights/{insight_id}")
def delete_insight(
    insight_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> dict:
    try:
        insight_service.delete_insight(db, principal.user_id, insight_id)
    except insight_service.InsightNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Insight deleted"}
