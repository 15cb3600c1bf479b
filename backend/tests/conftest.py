from __future__ import annotations

import os

os.environ.setdefault("OVERTIME_DATABASE_URL", "sqlite://")
os.environ.setdefault("OVERTIME_ENV", "test")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from overtime_tracker.core.clock import get_clock
from overtime_tracker.db.session import Base, get_session
from overtime_tracker.domains.office_hours.calendar import DatabaseOfficeHoursCalendar
from overtime_tracker.domains.projects.directory import ProjectDirectory
from overtime_tracker.domains.tracking.state_machine import TrackingStateMachine
from overtime_tracker.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Saturday evening: outside any seeded office hours.
T0 = datetime(2026, 10, 17, 20, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


def override_get_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    frozen = FrozenClock()
    app.dependency_overrides[get_clock] = lambda: frozen
    yield frozen
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def machine(db, clock):
    return TrackingStateMachine(
        db,
        calendar=DatabaseOfficeHoursCalendar(db),
        directory=ProjectDirectory(db),
        clock=clock,
    )


@pytest.fixture
def client(clock):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def add_rows():
    def _add(*rows) -> None:
        with TestingSessionLocal() as session:
            session.add_all(rows)
            session.commit()

    return _add
