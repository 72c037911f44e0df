"""
Pytest fixtures shared by the railclaim tests.

Every test gets its own in-memory SQLite database. The environment is set
before railclaim is imported so the module-level engine never tries to reach
Postgres.
"""

import os
import uuid
from datetime import date, datetime

os.environ.setdefault("DB_DSN", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("DEFAULT_CURRENCY", "EUR")

import pytest
import pytz
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from railclaim.core.db import Base
from railclaim.core.events import BookingCompleted, ClaimCreated, ClaimStatusChanged, ClaimSubmitted, EventBus
from railclaim.models.bookings import Booking
from railclaim.models.claims import Claim  # noqa: F401  (registers the table)
from railclaim.models.job_runs import JobRun  # noqa: F401
from railclaim.models.trains import Train
from railclaim.models.users import User
from railclaim.utils.trip_key import build_trip_id

UTC = pytz.utc


def utc(*args) -> datetime:
    return UTC.localize(datetime(*args))


class EventRecorder:
    """Subscribes to every pipeline event and keeps them in publish order."""

    EVENT_TYPES = (BookingCompleted, ClaimCreated, ClaimStatusChanged, ClaimSubmitted)

    def __init__(self, bus: EventBus):
        self.events = []
        for event_type in self.EVENT_TYPES:
            bus.subscribe(event_type, self.events.append)

    def of_type(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return EventRecorder(bus)


@pytest.fixture
def make_user(db):
    def _make(email=None):
        user = User(email=email or f"{uuid.uuid4().hex[:10]}@example.com")
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_booking(db, make_user):
    def _make(user=None, **overrides):
        user = user or make_user()
        values = {
            "user_id": user.id,
            "pnr": "ABC123",
            "tcn": "IV1234567890",
            "passenger_name": "John Doe",
            "train_number": "9007",
            "journey_date": date(2026, 1, 15),
            "origin": "GBSPX",
            "destination": "FRPLY",
        }
        values.update(overrides)
        booking = Booking(**values)
        db.add(booking)
        db.commit()
        return booking

    return _make


@pytest.fixture
def make_train(db):
    def _make(
        train_number="9007",
        service_date=date(2026, 1, 15),
        scheduled_departure=None,
        scheduled_arrival=None,
        actual_arrival=None,
        delay_minutes=None,
        trip_id=None,
    ):
        train = Train(
            trip_id=trip_id or build_trip_id(train_number, service_date),
            train_number=train_number,
            service_date=service_date,
            scheduled_departure=scheduled_departure or utc(service_date.year, service_date.month, service_date.day, 9, 1),
            scheduled_arrival=scheduled_arrival or utc(service_date.year, service_date.month, service_date.day, 12, 30),
            actual_arrival=actual_arrival,
            delay_minutes=delay_minutes,
        )
        db.add(train)
        db.commit()
        return train

    return _make
