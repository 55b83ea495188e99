"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- Test database (SQLite in-memory for speed)
- Test client (FastAPI TestClient)
- Authentication helpers
- A fake iCal feed server behind the shared fetch cache
"""

import pytest
from typing import Dict, Generator

import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db, get_session_factory
from app.models.family import Family
from app.models.user import User
from app.core.security import hash_password, create_access_token
from app.services.ical_cache import ICalFetchCache, get_ical_cache


# ---------------------------------------------------------------------------
# TEST DATABASE SETUP
# ---------------------------------------------------------------------------
# StaticPool keeps the same in-memory connection for every session, so
# background tasks opening their own session see the test data.

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ---------------------------------------------------------------------------
# ICAL FEED FIXTURES
# ---------------------------------------------------------------------------

def make_feed_transport(feeds: Dict[str, str], calls: Dict[str, int] = None) -> httpx.MockTransport:
    """
    Serve the given {url: body} mapping; unknown URLs answer 404.

    calls, when given, counts requests per URL.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls[url] = calls.get(url, 0) + 1
        if url not in feeds:
            return httpx.Response(404, text="not found")
        return httpx.Response(200, text=feeds[url])

    return httpx.MockTransport(handler)


@pytest.fixture
def feed_transport():
    """The make_feed_transport helper, for tests that build their own cache."""
    return make_feed_transport


@pytest.fixture
def ical_feeds() -> Dict[str, str]:
    """Mutable {url: ics body} mapping served to the app during a test."""
    return {}


@pytest.fixture
def ical_cache(ical_feeds: Dict[str, str]) -> ICalFetchCache:
    return ICalFetchCache(ttl_seconds=300, timeout_seconds=10, transport=make_feed_transport(ical_feeds))


# ---------------------------------------------------------------------------
# DATABASE FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Create a fresh database for each test function.

    - Creates all tables
    - Yields a session for the test
    - Drops all tables after test (clean slate)
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session, ical_cache: ICalFetchCache) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database and fake feeds.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_ical_cache] = lambda: ical_cache

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# FAMILY / USER FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def test_family(db: Session) -> Family:
    family = Family(name="The Testers")
    db.add(family)
    db.commit()
    db.refresh(family)
    return family


@pytest.fixture
def test_user(db: Session, test_family: Family) -> User:
    """
    Create a test user in the database.

    Returns:
        User with email "test@example.com" and password "testpassword"
    """
    user = User(
        family_id=test_family.id,
        email="test@example.com",
        hashed_password=hash_password("testpassword"),
        display_name="Test User",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user_token(test_user: User) -> str:
    return create_access_token(subject=str(test_user.id))


@pytest.fixture
def auth_headers(test_user_token: str) -> dict:
    """
    Create authorization headers with the test user's token.

    Returns:
        Dict with Authorization header
    """
    return {"Authorization": f"Bearer {test_user_token}"}


@pytest.fixture
def other_family_headers(db: Session) -> dict:
    """Authorization headers for a user of a second, unrelated family."""
    family = Family(name="The Neighbours")
    db.add(family)
    db.flush()
    user = User(
        family_id=family.id,
        email="neighbour@example.com",
        hashed_password=hash_password("testpassword"),
    )
    db.add(user)
    db.commit()
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id))}"}
