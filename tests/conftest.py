"""Shared fixtures.

Settings are read when ``app`` modules are imported, so the environment is
prepared here before any test module imports them.
"""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / f"task_notifications_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.setdefault("WEBSOCKET_HANDSHAKE_TIMEOUT_SECONDS", "5")

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.domain.entities import ROLE_OPERATOR, ROLE_SUPERVISOR, User  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.repositories import UserRepository  # noqa: E402
from app.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture()
def database():
    """Give each test an empty schema."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session(database):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user(database):
    """Insert a user; the password column holds a placeholder hash."""

    counter = {"value": 0}

    def _make_user(role: str = ROLE_OPERATOR, *, name: str | None = None, is_active: bool = True) -> User:
        counter["value"] += 1
        index = counter["value"]
        with SessionLocal() as db:
            return UserRepository(db).create(
                User(
                    id=None,
                    name=name or f"{role.title()} {index}",
                    email=f"{role}{index}@example.com",
                    password="!",
                    role=role,
                    is_active=is_active,
                )
            )

    return _make_user


@pytest.fixture()
def supervisor(make_user) -> User:
    return make_user(ROLE_SUPERVISOR)


@pytest.fixture()
def operator(make_user) -> User:
    return make_user(ROLE_OPERATOR)


def token_for(user: User, *, expires_in: timedelta | None = None) -> str:
    return create_access_token({"sub": user.id, "role": user.role}, expires_delta=expires_in)


@pytest.fixture()
def headers_for():
    """Return a builder of bearer headers for a user."""

    def _headers_for(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user)}"}

    return _headers_for


@pytest.fixture()
def token_factory():
    return token_for


@pytest.fixture()
def app(database):
    from main import create_app

    return create_app()


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
