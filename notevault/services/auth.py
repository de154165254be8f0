"""Authentication service: user management, JWT tokens and session resolution."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from notevault.config import get_settings
from notevault.models.user import User, UserRole

# JWT configuration
ALGORITHM = "HS256"


class EmailAlreadyRegisteredError(ValueError):
    """Raised when creating a user whose email (or username) is taken."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(
    db: Session,
    email: str,
    password: str,
    name: str | None = None,
    username: str | None = None,
    role: UserRole = UserRole.USER,
    **profile,
) -> User:
    """Create a new user with hashed password. Flushes; the caller commits."""
    email = normalize_email(email)
    if db.query(User).filter(User.email == email).first() is not None:
        raise EmailAlreadyRegisteredError("An account with this email already exists")
    if username and db.query(User).filter(User.username == username).first() is not None:
        raise EmailAlreadyRegisteredError("This username is already taken")
    user = User(email=email, name=name, username=username, role=role, **profile)
    user.set_password(password)
    db.add(user)
    db.flush()
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Validate credentials and return user, or None if invalid or deactivated."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None or not user.is_active:
        return None
    if not user.verify_password(password):
        return None
    user.last_login_at = datetime.now(UTC)
    user.is_online = True
    user.last_seen = user.last_login_at
    db.commit()
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def create_token_for_user(user: User) -> str:
    return create_access_token(data={"sub": user.id, "role": user.role.value})


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    """Resolve the user behind a JWT.

    Returns None for malformed, expired or tampered tokens, unknown users and
    deactivated accounts. The role is always read from the database, never
    from the token claims.
    """
    payload = decode_access_token(token)
    if payload is None:
        return None
    user_id: Optional[str] = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        return None
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return user
