"""Pytest fixtures and configuration for ChronosFlow tests."""

import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from factories import make_sub_tasks

from chronosflow.database.database import Base
from chronosflow.database.repository import StateRepository
from chronosflow.models.task import Task, TaskStatus, Priority, ScoringProfile
from chronosflow.models.state import AppState
from chronosflow.models.task_factory import default_state
from chronosflow.session.controller import SessionController
from chronosflow.session.ports import InMemoryStateStore


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def state_repository(db_session: Session):
    """Create a StateRepository instance for testing."""
    return StateRepository(db_session)


@pytest.fixture
def sample_task_base():
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    return {
        "id": "task-1",
        "title": "Test Task",
        "description": "",
        "priority": Priority.MEDIUM,
        "status": TaskStatus.TODO,
        "created_at": datetime(2024, 1, 1, 8, 0, 0),
        "scheduled_block": None,
        "sub_tasks": None,
        "linked_planning_task_id": None,
        "xp_stakes": None,
        "scoring_profile": ScoringProfile.STANDARD,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a plain sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def stake_task(sample_task_base):
    """Create a stake task (100 XP, HIGH priority)."""
    return Task(**{**sample_task_base, "id": "stake", "priority": Priority.HIGH, "xp_stakes": 100})


@pytest.fixture
def routine_task(sample_task_base):
    """Create a standard five-step routine with nothing checked."""
    return Task(**{**sample_task_base, "id": "routine", "sub_tasks": make_sub_tasks(5)})


@pytest.fixture
def default_app_state():
    """Starter state (fixed day so the Training exercises are stable)."""
    return default_state(datetime(2024, 1, 1).date())


@pytest.fixture
def memory_store(default_app_state):
    """In-memory state store seeded with the starter state."""
    return InMemoryStateStore(default_app_state)


@pytest.fixture
def session_controller(memory_store):
    """Session controller without a ticker or insight client."""
    return SessionController(store=memory_store)


@pytest.fixture
def test_client(session_controller):
    """Create a FastAPI test client with the session dependency overridden."""
    from chronosflow.api.app import app, get_session

    app.dependency_overrides[get_session] = lambda: session_controller

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def empty_state():
    """State with no tasks, goals, logs or rewards."""
    return AppState()
