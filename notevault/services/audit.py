"""Audit logging for privileged and denied actions.

Audit rows are written after the primary write has committed, in their own
commit. A failed audit write is rolled back and logged; it never fails the
request that triggered it.
"""

from __future__ import annotations

import logging

from fastapi import Request
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notevault.models.audit_log import AuditLog
from notevault.schemas.audit import UnauthorizedAccessDetails

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


def get_client_ip(request: Request | None) -> str:
    """Source address: first X-Forwarded-For hop, then X-Real-IP, then the peer."""
    if request is None:
        return UNKNOWN
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or UNKNOWN
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client:
        return request.client.host
    return UNKNOWN


def get_user_agent(request: Request | None) -> str:
    if request is None:
        return UNKNOWN
    return (request.headers.get("user-agent") or UNKNOWN)[:500]


def record_audit(
    db: Session,
    *,
    actor_id: str | None,
    resource: str,
    details: BaseModel,
    resource_id: str | None = None,
    request: Request | None = None,
) -> AuditLog | None:
    """Append an audit row whose action is the payload's ``kind``.

    Returns the stored row, or None when the write failed.
    """
    action = details.kind  # type: ignore[attr-defined]
    entry = AuditLog(
        user_id=actor_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        details=details.model_dump(mode="json", exclude={"kind"}),
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "Audit log write failed: action=%s resource=%s actor=%s",
            action,
            resource,
            actor_id,
        )
        return None
    return entry


def record_unauthorized_attempt(
    db: Session, actor_id: str, resource: str, request: Request
) -> AuditLog | None:
    """Audit a denied request against a privileged endpoint."""
    logger.warning(
        "Unauthorized access attempt: user=%s resource=%s %s %s",
        actor_id,
        resource,
        request.method,
        request.url.path,
    )
    return record_audit(
        db,
        actor_id=actor_id,
        resource=resource,
        details=UnauthorizedAccessDetails(endpoint=request.url.path, method=request.method),
        request=request,
    )


def list_audit_logs(
    db: Session,
    page: int,
    limit: int,
    action: str | None = None,
    user_id: str | None = None,
) -> tuple[list[AuditLog], int]:
    """Newest-first page of audit rows with optional action/actor filters."""
    query = db.query(AuditLog)
    if action:
        query = query.filter(AuditLog.action == action)
    if user_id:
        query = query.filter(AuditLog.user_id == user_id)
    total = query.count()
    rows = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total
