import os
from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")

from app.main import app  # noqa: E402
from app.core.database import (  # noqa: E402
    Base, create_db_engine, get_db, get_redis, get_session_factory
)
from app.core.security import UserRole, create_access_token, get_password_hash  # noqa: E402
from app.models import Slot, User  # noqa: E402
from app.services.booking_service import BookingCoordinator  # noqa: E402

TEST_PASSWORD = "TestPassword123"


class FakeRedis:
    """Counter-only stand-in for the Redis client used by rate limiting."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def incr(self, key):
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def coordinator(session_factory):
    return BookingCoordinator(session_factory)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(session_factory, fake_redis):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_redis] = lambda: fake_redis

    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def booking_day():
    return date.today() + timedelta(days=7)


@pytest.fixture
def make_user(db):
    def _make_user(email="user@example.com", name="Test User", role=UserRole.USER, **kwargs):
        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=True,
            **kwargs
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_slot(db, booking_day):
    def _make_slot(start=time(9, 0), end=time(9, 30), slot_date=None, is_available=True, **kwargs):
        slot = Slot(
            date=slot_date or booking_day,
            start_time=start,
            end_time=end,
            is_available=is_available,
            **kwargs
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make_slot


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token.access_token}"}

    return _auth_headers
