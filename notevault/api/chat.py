"""Public chat API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from notevault.api.deps import get_db, require_auth
from notevault.models.user import User
from notevault.schemas.chat import ChatMessageCreate, ChatMessageEnvelope, ChatMessageRead, ChatPage
from notevault.services import chat_service

router = APIRouter()


@router.get("", response_model=ChatPage)
def read_messages(
    limit: int = Query(chat_service.DEFAULT_PAGE_SIZE, ge=1, le=chat_service.MAX_PAGE_SIZE),
    cursor: str | None = Query(None, max_length=36),
    db: Session = Depends(get_db),
    _user: User = Depends(require_auth),
) -> ChatPage:
    """Latest messages, oldest first. Pass nextCursor back to page further back."""
    try:
        messages, has_more, next_cursor = chat_service.list_messages(db, limit, cursor)
    except chat_service.InvalidCursorError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ChatPage(
        messages=[ChatMessageRead.model_validate(m) for m in messages],
        has_more=has_more,
        next_cursor=next_cursor,
    )


@router.post("", status_code=201, response_model=ChatMessageEnvelope)
def send_message(
    body: ChatMessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_auth),
) -> ChatMessageEnvelope:
    message = chat_service.post_message(db, user.id, body.content, body.type)
    return ChatMessageEnvelope(message=ChatMessageRead.model_validate(message))
