import os

# In-memory database, no Redis: must be set before studio_booking is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("REDIS_URL", None)

from datetime import datetime

import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studio_booking import redis_client as redis_module
from studio_booking.database import enable_sqlite_fk, get_db
from studio_booking.main import app
from studio_booking.models import Base
from studio_booking.models.tables import (
    Appointments,
    ScheduleRules,
    Staff,
    StaffSettings,
    TimeBlocks,
)
from studio_booking.services.slots.timeutils import to_db_utc

# Monday
WEEK = "2024-06-03"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=pytz.UTC)


def parse_dt(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class FakeRedis:
    """Records pushed events instead of talking to a server."""

    def __init__(self):
        self.pushed = []

    def rpush(self, key, value):
        self.pushed.append((key, value))
        return len(self.pushed)

    def ping(self):
        return True


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis_module, "redis_client", fake)
    return fake


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_staff(db):
    """Create staff + settings + rules + one time block; returns (staff, block)."""

    def _make(
        rules=(),
        timezone="UTC",
        buffer_minutes=0,
        calendar_start_hour=8,
        calendar_end_hour=22,
        open_until=None,
        duration_mins=60,
        name="Alice",
    ):
        staff = Staff(name=name, is_active=1, is_default=0)
        db.add(staff)
        db.flush()

        db.add(StaffSettings(
            staff_id=staff.id,
            timezone=timezone,
            buffer_minutes=buffer_minutes,
            calendar_start_hour=calendar_start_hour,
            calendar_end_hour=calendar_end_hour,
            open_until=to_db_utc(open_until) if open_until else None,
        ))
        for day, start, end, slot_type in rules:
            db.add(ScheduleRules(
                staff_id=staff.id,
                day_of_week=day,
                start_time=start,
                end_time=end,
                slot_type=slot_type,
            ))
        block = TimeBlocks(
            staff_id=staff.id,
            name=f"{duration_mins} min",
            duration_mins=duration_mins,
            color="#6366f1",
            is_active=1,
        )
        db.add(block)
        db.commit()
        return staff, block

    return _make


@pytest.fixture
def add_appointment(db):
    def _add(staff, block, start, end, status="CONFIRMED", client_name="Existing"):
        appt = Appointments(
            staff_id=staff.id,
            time_block_id=block.id,
            client_name=client_name,
            phone="123",
            start_time=to_db_utc(start),
            end_time=to_db_utc(end),
            status=status,
        )
        db.add(appt)
        db.commit()
        return appt

    return _add
