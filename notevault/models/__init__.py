"""SQLAlchemy models."""

from notevault.models.activity import Activity
from notevault.models.ai_insight import AIInsight, InsightType
from notevault.models.announcement import Announcement
from notevault.models.audit_log import AuditLog
from notevault.models.chat_message import ChatMessage, ChatMessageType
from notevault.models.file import File
from notevault.models.note import Note, NoteType
from notevault.models.note_connection import ConnectionStyle, NoteConnection
from notevault.models.system_settings import SystemSettings
from notevault.models.user import User, UserRole
from notevault.models.workspace import Workspace
from notevault.models.workspace_member import MemberRole, WorkspaceMember

__all__ = [
    "AIInsight",
    "Activity",
    "Announcement",
    "AuditLog",
    "ChatMessage",
    "ChatMessageType",
    "ConnectionStyle",
    "File",
    "InsightType",
    "MemberRole",
    "Note",
    "NoteConnection",
    "NoteType",
    "SystemSettings",
    "User",
    "UserRole",
    "Workspace",
    "WorkspaceMember",
]
