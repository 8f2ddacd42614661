"""
SpoolVault test suite — shared fixtures.

The app runs in-process under FastAPI's TestClient against a throwaway
SQLite file. Environment is pinned here, before any backend import, because
core.config reads it at import time.

Usage:
    pip install -e ".[test]"
    pytest tests -v --tb=short
"""

import os
import sys
import tempfile
import uuid
from pathlib import Path
from types import SimpleNamespace

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="spoolvault-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/spoolvault.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-" + uuid.uuid4().hex
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "BootstrapPass1!"
os.environ.pop("API_KEY", None)

BACKEND_DIR = Path(__file__).resolve().parents[1] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import text  # noqa: E402

from core.app import create_app  # noqa: E402
from core.auth import create_access_token, hash_password  # noqa: E402
from core.db import SessionLocal  # noqa: E402
from core.scope import Scope  # noqa: E402

from helpers import ADMIN_USERNAME, auth_headers  # noqa: E402


# Child tables first; the bootstrap admin survives between tests
_RESET_STATEMENTS = [
    "DELETE FROM inventory_records",
    "DELETE FROM sharing_rules",
    "DELETE FROM colors",
    "DELETE FROM diameters",
    "DELETE FROM manufacturers",
    "DELETE FROM materials",
    "DELETE FROM storage_locations",
    "DELETE FROM audit_logs",
    "DELETE FROM users WHERE username != :admin",
]

# Cheap hash reused for fixture users; bcrypt dominates otherwise
_FIXTURE_PASSWORD = "FixturePass1!"
_FIXTURE_HASH = None


# ---------------------------------------------------------------------------
# Session-scoped fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    return create_app()


@pytest.fixture(scope="session")
def client(app):
    """TestClient with lifespan run (tables created, bootstrap admin present)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _reset_database(client):
    yield
    db = SessionLocal()
    try:
        for statement in _RESET_STATEMENTS:
            db.execute(text(statement), {"admin": ADMIN_USERNAME})
        db.commit()
    finally:
        db.close()


# ---------------------------------------------------------------------------
# Database and users
# ---------------------------------------------------------------------------

@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user():
    """Factory: make_user(display_name=None, is_admin=False) -> user namespace."""
    from modules.accounts.models import User

    global _FIXTURE_HASH
    if _FIXTURE_HASH is None:
        _FIXTURE_HASH = hash_password(_FIXTURE_PASSWORD)

    def _make(display_name=None, is_admin=False, username=None):
        session = SessionLocal()
        try:
            user = User(
                username=username or f"user_{uuid.uuid4().hex[:8]}",
                display_name=display_name,
                password_hash=_FIXTURE_HASH,
                is_admin=is_admin,
            )
            session.add(user)
            session.commit()
            token = create_access_token({"sub": user.username, "admin": user.is_admin})
            return SimpleNamespace(
                id=user.id,
                username=user.username,
                password=_FIXTURE_PASSWORD,
                is_admin=user.is_admin,
                headers=auth_headers(token),
                scope=Scope(owner_id=user.id),
            )
        finally:
            session.close()

    return _make


@pytest.fixture()
def owner(make_user):
    return make_user(display_name="Filament Fan")


@pytest.fixture()
def other_owner(make_user):
    return make_user(display_name="Someone Else")


@pytest.fixture()
def admin(make_user):
    return make_user(is_admin=True)
