"""Public chat schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from notevault.models.chat_message import ChatMessageType
from notevault.schemas.auth import UserSummary
from notevault.schemas.base import CamelModel

MAX_CHAT_MESSAGE_LENGTH = 1000


class ChatMessageCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=MAX_CHAT_MESSAGE_LENGTH)
    type: ChatMessageType = ChatMessageType.TEXT


class ChatMessageRead(CamelModel):
    id: str
    content: str
    type: ChatMessageType
    author_id: str
    author: UserSummary
    created_at: datetime


class ChatMessageEnvelope(CamelModel):
    message: ChatMessageRead


class ChatPage(CamelModel):
    """Oldest-first page; next_cursor points at the oldest message returned."""

    messages: list[ChatMessageRead]
    has_more: bool
    next_cursor: str | None = None
