"""
Pytest configuration and fixtures.

The app runs against an SQLite file in a temp directory. Settings are read
from the environment on first import, so the variables are set before any
campus_crush module is imported.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="campus_crush_tests_")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from campus_crush.core.auth import hash_password, create_access_token
from campus_crush.db.database import engine, get_db_session, init_db
from campus_crush.db.tables import colleges, metadata, users
from campus_crush.main import app
from campus_crush.services.monitoring_service import get_monitoring_service
from campus_crush.utils.cache import cache

TEST_PASSWORD = "password123"
TEST_DOMAIN = "test.edu"


# ============================================================================
# APP / DATABASE
# ============================================================================


@pytest.fixture(scope="session")
def client():
    init_db()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="session")
def password_hash():
    # bcrypt is slow on purpose; hash once per session
    return hash_password(TEST_PASSWORD)


@pytest.fixture(autouse=True)
def clean_state():
    """Empty every table, the cache and the monitoring buffers between tests."""
    init_db()
    yield
    with engine.begin() as conn:
        for table in reversed(metadata.sorted_tables):
            conn.execute(table.delete())
    cache.clear()
    get_monitoring_service().reset()


# ============================================================================
# FACTORIES
# ============================================================================


def insert_college(name: str = "Test College", email_domain: str = TEST_DOMAIN, is_active: bool = True) -> int:
    with get_db_session() as db:
        result = db.execute(
            insert(colleges).values(
                name=name, email_domain=email_domain, is_active=is_active, created_at=datetime.utcnow()
            ).returning(colleges.c.college_id)
        )
        return result.scalar_one()


@pytest.fixture
def college_id():
    return insert_college()


@pytest.fixture
def make_user(password_hash):
    """
    Insert a user directly.

    Defaults to an onboarded, verified student of the given college.
    """
    counter = {"n": 0}

    def _make_user(
        college_id=None,
        gender="male",
        first_name=None,
        last_name="Tester",
        display_name=None,
        role="user",
        verified=True,
        is_active=True,
        email=None
    ) -> dict:
        counter["n"] += 1
        first_name = first_name or f"User{counter['n']}"
        values = {
            "email": email or f"{first_name.lower()}{counter['n']}@{TEST_DOMAIN}",
            "password_hash": password_hash,
            "role": role,
            "first_name": first_name,
            "last_name": last_name,
            "display_name": display_name,
            "college_id": college_id,
            "gender": gender,
            "verification_status": "verified" if verified else "unverified",
            "is_active": is_active,
            "created_at": datetime.utcnow(),
            "updated_at": datetime.utcnow()
        }
        with get_db_session() as db:
            result = db.execute(insert(users).values(**values).returning(users.c.user_id))
            values["user_id"] = result.scalar_one()
        return values

    return _make_user


def make_auth_headers(user: dict) -> dict:
    token = create_access_token(data={"sub": str(user["user_id"]), "role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return make_auth_headers


@pytest.fixture
def rate_limited():
    """Turn the limiter on for one test, with empty counters before and after."""
    from campus_crush.core.rate_limit import limiter

    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()
