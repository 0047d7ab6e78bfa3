"""
Pytest configuration and fixtures
"""
import os
import uuid
from datetime import timedelta

# Module-level config in app.database / app.auth is read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_ISOLATION_LEVEL"] = "SERIALIZABLE"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ALGORITHM"] = "HS256"

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base
from app.models import UserRole, utcnow
from app.schemas.actor import Actor
from app.schemas.assignment import AssignmentCreate
from app.services import assignments as assignment_service
from app.services import submissions as submission_service

pytest_plugins = ["pytest_asyncio"]


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


def _actor(role: UserRole) -> Actor:
    return Actor(id=uuid.uuid4(), role=role)


@pytest.fixture
def teacher():
    return _actor(UserRole.TEACHER)


@pytest.fixture
def other_teacher():
    return _actor(UserRole.TEACHER)


@pytest.fixture
def admin():
    return _actor(UserRole.ADMIN)


@pytest.fixture
def student():
    return _actor(UserRole.STUDENT)


@pytest.fixture
def other_student():
    return _actor(UserRole.STUDENT)


@pytest.fixture
def make_students():
    """Build n fresh student actors."""
    def _make(n):
        return [_actor(UserRole.STUDENT) for _ in range(n)]
    return _make


@pytest.fixture
def open_assignment(db, teacher):
    """
    Create and publish an assignment owned by `teacher`.
    Returns the assignment id.
    """
    async def _create(max_score=100, deadline=None, publish=True):
        assignment = await assignment_service.create_assignment(
            db,
            teacher,
            AssignmentCreate(title="Essay", max_score=max_score, deadline=deadline),
        )
        if publish:
            await assignment_service.publish_assignment(db, teacher, assignment.id)
        return assignment.id
    return _create


@pytest.fixture
def submit(db):
    """Submit text work for a student actor. Returns the submission id."""
    async def _submit(actor, assignment_id, content="my answer", **kwargs):
        submission = await submission_service.create_submission(
            db, actor, assignment_id, content=content, **kwargs
        )
        return submission.id
    return _submit


@pytest.fixture
def past_deadline():
    return utcnow() - timedelta(days=1)


@pytest.fixture
def future_deadline():
    return utcnow() + timedelta(days=7)
