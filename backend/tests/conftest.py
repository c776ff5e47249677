"""
Run the app against an in-memory SQLite database and locally minted tokens.
The environment must be set before any liftlog module is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_URL"] = "http://auth.test"

import pytest
from sqlalchemy import event, select

from liftlog.db import Base, SessionLocal, engine
from liftlog.main import app
from liftlog.models import WorkoutType
from helpers import new_user

WORKOUT_TYPES = [("strength", "Strength", "dumbbell"), ("cardio", "Cardio", "heart")]


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    with SessionLocal() as db:
        for key, name, icon in WORKOUT_TYPES:
            db.add(WorkoutType(key=key, name=name, icon=icon))
        db.commit()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def workout_type_id(db):
    return db.execute(select(WorkoutType.id).where(WorkoutType.key == "strength")).scalar_one()


@pytest.fixture
def alice():
    return new_user("alice@example.com")


@pytest.fixture
def bob():
    return new_user("bob@example.com")


@pytest.fixture
def count_queries():
    """Collects every SQL statement sent to the engine while the test runs."""
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)
