"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite schema built from the model
metadata. The engine uses a single shared connection, so the test session,
request sessions and the page gates all see the same data.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_PASSWORD, TEST_SECRET_KEY

# Force the test database before any notevault import reads settings
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SECRET_KEY"] = TEST_SECRET_KEY
os.environ["AI_PROVIDER"] = "local"
os.environ.pop("LLM_API_KEY", None)


@pytest.fixture
def db() -> Iterator[Session]:
    """Session on a freshly created schema; tables are dropped afterwards."""
    import notevault.models  # noqa: F401  registers tables
    from notevault.db.session import Base, SessionLocal, engine

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def _clear_engine_cache() -> Iterator[None]:
    """Insight engines are cached per provider name; start each test clean."""
    from notevault.ai.router import clear_engine_cache

    clear_engine_cache()
    yield
    clear_engine_cache()


@pytest.fixture
def client(db: Session) -> TestClient:
    """FastAPI test client bound to the per-test database."""
    from notevault.main import app

    return TestClient(app)


@pytest.fixture
def client_no_raise(db: Session) -> TestClient:
    """Test client that returns 500 responses instead of re-raising."""
    from notevault.main import app

    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def make_user(db: Session) -> Callable[..., object]:
    """Factory: create and commit a user. Defaults to the USER role."""
    from notevault.models.user import UserRole
    from notevault.services.auth import create_user

    def _make(
        email: str,
        role: UserRole = UserRole.USER,
        password: str = TEST_PASSWORD,
        name: str | None = None,
        **kwargs,
    ):
        user = create_user(
            db,
            email=email,
            password=password,
            name=name or email.split("@")[0].title(),
            role=role,
            **kwargs,
        )
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    from notevault.models.user import UserRole

    return make_user("admin@example.com", role=UserRole.ADMIN, username="admin")


@pytest.fixture
def moderator(make_user):
    from notevault.models.user import UserRole

    return make_user("mod@example.com", role=UserRole.MODERATOR, username="mod")


@pytest.fixture
def user(make_user):
    return make_user("user@example.com", username="user")


@pytest.fixture
def other_user(make_user):
    return make_user("other@example.com", username="other")

