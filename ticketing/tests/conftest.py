import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock

# Keep the application's own engine off disk; tests bind their own per-test database
os.environ.setdefault("DATABASE_URL", "sqlite://")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session

from ticketing.core.clock import get_clock
from ticketing.database.db import Base, get_db, make_engine
from ticketing.main import app
from ticketing.models.events import Event
from ticketing.models.users import User

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock pinned to a settable instant."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def engine(tmp_path):
    # File-backed so that threads in concurrency tests get their own connections
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db: Session = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def redis_client(monkeypatch: pytest.MonkeyPatch, fake_redis):
    """Point the purchase lock at an in-process fake Redis."""
    monkeypatch.setattr("ticketing.services.tickets.get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture(autouse=True)
def confirmation_task(monkeypatch: pytest.MonkeyPatch) -> Mock:
    # No broker in tests; record enqueues instead
    task = Mock()
    monkeypatch.setattr("ticketing.routes.tickets.send_purchase_confirmation_task", task)
    return task


@pytest.fixture
def client(session_factory, clock, redis_client):
    def override_get_db():
        db: Session = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    counter = iter(range(1, 10_000))

    def _make_user(name: str | None = None) -> User:
        n = next(counter)
        user = User(name=name or f"User {n}", email=f"user{n}@example.com")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_event(db_session: Session):
    def _make_event(
        name: str = "Concert",
        capacity: int = 10,
        event_date: datetime | None = None,
        price: Decimal = Decimal("49.99"),
    ) -> Event:
        event = Event(
            name=name,
            description=f"{name} description",
            capacity=capacity,
            price=price,
            event_date=event_date or NOW + timedelta(days=7),
            location="Main Hall",
        )
        db_session.add(event)
        db_session.commit()
        db_session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def user(make_user) -> User:
    return make_user("Alice")
