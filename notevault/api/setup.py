"""First-run setup API: report status, create the initial administrator."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from notevault.api.deps import get_db
from notevault.schemas.audit import InitialAdminDetails
from notevault.schemas.setup import SetupRequest, SetupResponse, SetupStatus, SetupUser
from notevault.services.audit import record_audit
from notevault.services.setup import (
    EmailAlreadyRegisteredError,
    SetupAlreadyCompletedError,
    create_initial_admin,
    is_setup_required,
)

router = APIRouter()


@router.get("", response_model=SetupStatus)
def get_setup_status(db: Session = Depends(get_db)) -> SetupStatus:
    return SetupStatus(setup_required=is_setup_required(db))


@router.post("", status_code=201, response_model=SetupResponse)
def create_admin(
    body: SetupRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> SetupResponse:
    """Create the initial ADMIN. Refused once any admin exists."""
    try:
        user = create_initial_admin(db, body.name, body.email, body.password)
    except SetupAlreadyCompletedError:
        raise HTTPException(status_code=400, detail="Setup has already been completed")
    except EmailAlreadyRegisteredError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    record_audit(
        db,
        actor_id=user.id,
        resource="users",
        resource_id=user.id,
        details=InitialAdminDetails(email=user.email),
        request=request,
    )
    return SetupResponse(
        message="Admin user created successfully",
        user=SetupUser.model_validate(user),
    )
