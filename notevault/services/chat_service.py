"""Public chat: append messages, page backwards by cursor."""

from __future__ import annotations

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from notevault.models.chat_message import ChatMessage, ChatMessageType
from notevault.services import activity as activity_log

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


class InvalidCursorError(ValueError):
    """The cursor does not name an existing message."""


def list_messages(
    db: Session, limit: int = DEFAULT_PAGE_SIZE, cursor: str | None = None
) -> tuple[list[ChatMessage], bool, str | None]:
    """Return (messages oldest-first, has_more, next_cursor).

    Pages walk backwards in time. A cursor names the oldest message of the
    previous page; the next page holds the messages strictly older than it.
    """
    query = db.query(ChatMessage)
    if cursor:
        anchor = db.get(ChatMessage, cursor)
        if anchor is None:
            raise InvalidCursorError("Unknown cursor")
        query = query.filter(
            or_(
                ChatMessage.created_at < anchor.created_at,
                and_(
                    ChatMessage.created_at == anchor.created_at,
                    ChatMessage.id < anchor.id,
                ),
            )
        )

    newest_first = (
        query.order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
        .all()
    )
    messages = list(reversed(newest_first))
    has_more = len(messages) == limit
    next_cursor = messages[0].id if messages else None
    return messages, has_more, next_cursor


def post_message(
    db: Session, author_id: str, content: str, message_type: ChatMessageType
) -> ChatMessage:
    message = ChatMessage(content=content, type=message_type, author_id=author_id)
    db.add(message)
    activity_log.add_activity(
        db,
        type=activity_log.CHAT_MESSAGE,
        title="Chat Message",
        description="Sent a message in public chat",
        user_id=author_id,
    )
    db.commit()
    db.refresh(message)
    return message
