"""Authentication API routes."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from notevault.api.deps import AUTH_COOKIE, get_current_user, get_db, require_auth
from notevault.config import get_settings
from notevault.models.user import User
from notevault.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserEnvelope,
    UserRead,
)
from notevault.services.auth import (
    EmailAlreadyRegisteredError,
    authenticate_user,
    create_token_for_user,
    create_user,
)

router = APIRouter()


def set_session_cookie(response: Response, token: str) -> None:
    """Httponly cookie for browser sessions, same lifetime as the token."""
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=60 * 60 * get_settings().access_token_expire_hours,
        path="/",
    )


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """Authenticate user and return JWT token.

    Also sets an httponly cookie for browser sessions.
    """
    user = authenticate_user(db, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_token_for_user(user)
    set_session_cookie(response, token)
    return TokenResponse(access_token=token)


@router.post("/logout")
def logout(
    response: Response,
    db: Session = Depends(get_db),
    user: User | None = Depends(get_current_user),
) -> dict:
    """Clear the authentication cookie and mark the user offline."""
    if user is not None:
        user.is_online = False
        user.last_seen = datetime.now(UTC)
        db.commit()
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return {"message": "Logged out"}


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(require_auth)) -> UserEnvelope:
    """Return the currently authenticated user's information."""
    return UserEnvelope(user=UserRead.model_validate(current_user))


@router.post("/register", status_code=201, response_model=UserEnvelope)
def register(
    body: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> UserEnvelope:
    """Self-service sign-up. New accounts always get the USER role."""
    try:
        user = create_user(
            db,
            email=body.email,
            password=body.password,
            name=body.name,
            username=body.username,
        )
    except EmailAlreadyRegisteredError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(user)
    set_session_cookie(response, create_token_for_user(user))
    return UserEnvelope(user=UserRead.model_validate(user))
