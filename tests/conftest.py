"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from rent_assist.api.dependencies import get_change_feed
from rent_assist.api.main import create_app
from rent_assist.domain.models import PaymentSchedule
from rent_assist.domain.schedule import calculate_payment_schedule
from rent_assist.infrastructure.database.models import Base
from rent_assist.infrastructure.database.session import get_db
from rent_assist.infrastructure.realtime import ChangeFeed


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def feed() -> ChangeFeed:
    """Isolated change feed per test"""
    return ChangeFeed()


@pytest.fixture
def client(db: Session, feed: ChangeFeed) -> TestClient:
    """Create FastAPI test client with test database and change feed"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_change_feed] = lambda: feed
    return TestClient(app)


@pytest.fixture
def sample_schedule() -> PaymentSchedule:
    """12-month schedule on 12,000 at 28.08% starting 1 January 2025"""
    return calculate_payment_schedule(12000, 28.08, 12, start_date=date(2025, 1, 1))
