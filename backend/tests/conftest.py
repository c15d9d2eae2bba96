"""Shared fixtures: in-memory SQLite app, per-test schema and feed store."""

import os
from datetime import datetime, timedelta, timezone

# Configure before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["OPENAI_API_KEY"] = ""
os.environ["STORAGE_URL"] = ""
os.environ["TIMEZONE"] = "UTC"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import event  # noqa: E402

from studyfeed.api.deps import get_feed_store  # noqa: E402
from studyfeed.db import Base, SessionLocal, engine  # noqa: E402
from studyfeed.main import app  # noqa: E402
from studyfeed.models.follow import Follow  # noqa: E402
from studyfeed.models.goal import Goal  # noqa: E402
from studyfeed.models.material import Material  # noqa: E402
from studyfeed.models.profile import Profile  # noqa: E402
from studyfeed.models.study_record import StudyRecord  # noqa: E402
from studyfeed.services.feed_store import FeedStore  # noqa: E402

VIEWER = "11111111-1111-1111-1111-111111111111"
USER_A = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
USER_B = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"


def as_user(user_id):
    return {"X-User-Id": user_id}


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store():
    return FeedStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_feed_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def select_log():
    """Collects SELECT statements issued while the fixture is active."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", _record)


# --------- Row factories --------- #

_BASE_TIME = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    """Deterministic created_at: larger `minutes` means newer."""
    return _BASE_TIME + timedelta(minutes=minutes)


def make_record(db, user_id, subject="数学", duration=60, date="2025-01-01", created=0, notes=""):
    row = StudyRecord(
        user_id=user_id,
        subject=subject,
        duration=duration,
        date=date,
        notes=notes,
        created_at=at(created),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def make_goal(db, user_id, title="目標", date=None, created=0):
    row = Goal(user_id=user_id, title=title, date=date, created_at=at(created))
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def make_profile(db, user_id, display_name=None, avatar_url=None):
    row = Profile(id=user_id, display_name=display_name, avatar_url=avatar_url)
    db.add(row)
    db.commit()
    return row


def make_material(db, name, image=None, user_id=USER_A):
    row = Material(user_id=user_id, name=name, image=image)
    db.add(row)
    db.commit()
    return row


def make_follow(db, follower_id, following_id):
    db.add(Follow(follower_id=follower_id, following_id=following_id))
    db.commit()
