"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from datetime import datetime, timezone
from typing import Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.models import GameModel
from src.db.schema import Base
from tests.mocks import MockGateway

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Iterator[Session]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def mock_gateway() -> MockGateway:
    return MockGateway()


@pytest.fixture
def scheduled_game() -> GameModel:
    return GameModel(status="scheduled")


@pytest.fixture
def live_game() -> GameModel:
    """Bottom of the 3rd, one out, away leads 3-1."""
    return GameModel(
        status="in_progress",
        home_score=1,
        away_score=3,
        current_inning=3,
        current_inning_half="bottom",
        outs=1,
        home_inning_scores=[0, 1],
        away_inning_scores=[2, 0, 1],
        started_at=datetime(2026, 5, 16, 17, 0, tzinfo=timezone.utc),
    )
