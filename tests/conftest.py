"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Users of each role and their auth headers
- Job factory
"""

import os
import tempfile

# Must be set before the application modules read their settings
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite:///:memory:")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["USE_S3"] = "false"
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="worknexus-test-uploads-"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import worknexus.models  # noqa: F401  Register models on Base.metadata
from worknexus.core.database import Base, get_db
from worknexus.core.security import create_access_token
from worknexus.core.timeutils import utcnow
from worknexus.crud import job as job_crud
from worknexus.crud import user as user_crud
from worknexus.models.user import AppRole
from worknexus.schemas.job import JobCreateRequest
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_user(db, email, role=AppRole.USER, full_name=None, password="password123"):
    """Create a user with a profile; extra roles are granted on top of "user"."""
    user = user_crud.create(db, email, password, full_name or email.split("@")[0].title())
    if role != AppRole.USER:
        user_crud.add_role(db, user.id, role)
        db.commit()
        db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_factory(db_session):
    """Factory: user_factory(email, role=AppRole.USER) creates a user with a profile."""
    def _make(email, role=AppRole.USER, full_name=None):
        return make_user(db_session, email, role, full_name=full_name)
    return _make


@pytest.fixture
def headers_for():
    """Factory: headers_for(user) builds a Bearer header for that user."""
    return auth_headers


@pytest.fixture
def worker(db_session):
    return make_user(db_session, "worker@example.com", full_name="Asha Worker")


@pytest.fixture
def other_worker(db_session):
    return make_user(db_session, "other@example.com", full_name="Ravi Worker")


@pytest.fixture
def organizer(db_session):
    return make_user(db_session, "organizer@example.com", AppRole.ORGANIZER, full_name="Olive Organizer")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", AppRole.ADMIN, full_name="Adi Admin")


@pytest.fixture
def worker_headers(worker):
    return auth_headers(worker)


@pytest.fixture
def organizer_headers(organizer):
    return auth_headers(organizer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def sample_job_data():
    """Request body for posting a job that starts tomorrow"""
    start = utcnow() + timedelta(days=1)
    return {
        "title": "Wedding Catering Staff",
        "description": "Serve food and drinks at a 300-guest wedding reception.",
        "event_type": "wedding",
        "location": "Grand Palace Banquet Hall",
        "city": "Pune",
        "state": "Maharashtra",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(hours=8)).isoformat(),
        "total_hours": 8,
        "workers_needed": 2,
        "wage_per_hour": 150,
        "meal_provided": True,
        "requirements": "Black formals, Prior catering experience",
    }


@pytest.fixture
def make_job(db_session, organizer, sample_job_data):
    """Factory: make_job(**overrides) stores a job posted by the organizer fixture."""
    def _make_job(owner=None, **overrides):
        data = {**sample_job_data, **overrides}
        return job_crud.create(db_session, (owner or organizer).id, JobCreateRequest(**data))
    return _make_job
