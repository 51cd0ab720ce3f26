# tests/conftest.py
"""
Shared fixtures.

Every test gets its own file-based SQLite database under ``tmp_path`` so
that separate sessions contend for real locks. Set TEST_DATABASE_URL to run
the suite against PostgreSQL instead (tables are dropped after each test).
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

import advisor_booking.models  # noqa: F401
from advisor_booking.api.dependencies import (
    get_db,
    get_notifier,
    get_reminder_scheduler,
    get_session_factory,
)
from advisor_booking.auth import create_access_token
from advisor_booking.core.time_window import FixedClock
from advisor_booking.database import Base
from advisor_booking.database.engines import build_engine
from advisor_booking.main import app
from advisor_booking.models import Admin
from advisor_booking.tasks.jobs import run_reminder_cycle
from advisor_booking.tasks.reminder_scheduler import ReminderScheduler

from .helpers import NOW, RecordingNotifier, create_admin


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite:///{tmp_path / 'advisor_booking.db'}"
    test_engine = build_engine(url, lock_timeout_seconds=10.0)
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scheduler(session_factory: sessionmaker, notifier: RecordingNotifier, clock: FixedClock):
    reminder_scheduler = ReminderScheduler(
        lambda: run_reminder_cycle(session_factory, notifier, clock),
        clock=clock,
    )
    yield reminder_scheduler
    reminder_scheduler.stop()


@pytest.fixture
def client(
    session_factory: sessionmaker,
    notifier: RecordingNotifier,
    scheduler: ReminderScheduler,
) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_reminder_scheduler] = lambda: scheduler

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin(db: Session) -> Admin:
    return create_admin(db)


@pytest.fixture
def auth_headers(admin: Admin) -> dict:
    token = create_access_token({"sub": admin.email, "admin_id": admin.id})
    return {"Authorization": f"Bearer {token}"}
