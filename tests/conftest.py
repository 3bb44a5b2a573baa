"""Pytest fixtures and configuration for dayblocks tests."""

import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from dayblocks.database.database import Base
from dayblocks.database import models  # noqa: F401  (registers tables)
from dayblocks.database.planner_state_repository import PlannerStateRepository
from dayblocks.engine.block_store import BlockStore
from dayblocks.engine.drag import DragInteractionController
from dayblocks.engine.session import PlannerSession
from dayblocks.engine.time_axis import TimeAxis
from dayblocks.models.constants import DEFAULT_GOALS, DEFAULT_TEMPLATES
from dayblocks.models.goal import Goal


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def test_date():
    """Date used as the active planner day."""
    return date(2024, 1, 1)


@pytest.fixture
def axis():
    """Default 08:00-24:00 window on a 30-minute grid."""
    return TimeAxis(day_start_minute=480, day_end_minute=1440, snap_unit_minutes=30)


@pytest.fixture
def store(axis):
    return BlockStore(axis)


@pytest.fixture
def controller(axis, store):
    """Controller over a 960-unit extent: one axis unit per minute."""
    return DragInteractionController(axis, store, axis_extent=960.0)


@pytest.fixture
def sample_spec_base(test_date):
    """Base block spec data that can be overridden."""
    return {
        "date": test_date,
        "duration_minutes": 90,
        "goal_id": "g1",
        "note": "Deep Work",
    }


@pytest.fixture
def goals():
    return [
        Goal(id="g1", title="Goal One", weekly_target_minutes=600),
        Goal(id="g2", title="Goal Two", weekly_target_minutes=300),
    ]


@pytest.fixture
def planner_session(test_date):
    """Planner session seeded with the default goals and templates."""
    return PlannerSession(goals=DEFAULT_GOALS, templates=DEFAULT_TEMPLATES, active_date=test_date)


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
    """Create a PlannerStateRepository instance for testing."""
    return PlannerStateRepository(db_session)


@pytest.fixture
def test_client(db_session: Session, planner_session):
    """Create a FastAPI test client with overridden database and session dependencies."""
    from dayblocks.api.app import app, get_session
    from dayblocks.database.database import get_db

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    def override_get_session():
        return planner_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
