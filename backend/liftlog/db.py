from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import StaticPool
from .settings import get_settings

settings = get_settings()

ATOMIC_KEY = "liftlog.atomic"


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # in-memory SQLite must share one connection across threads (TestClient)
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {"pool_pre_ping": True}


# Create the SQLAlchemy engine
engine = create_engine(settings.sqlalchemy_url, **_engine_kwargs(settings.sqlalchemy_url))

if settings.sqlalchemy_url.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def _sqlite_foreign_keys(dbapi_conn, _record):
        # ON DELETE SET NULL on workout_exercise.exercise_id depends on it
        dbapi_conn.execute("PRAGMA foreign_keys=ON")

# Define the base class that all models should inherit from
class Base(DeclarativeBase):
    pass

# Session factory
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Group several repository mutations into one transaction.

    Repositories flush instead of committing while the flag is set; the whole
    block is committed once, or rolled back if anything inside raises.
    """
    if db.info.get(ATOMIC_KEY):
        yield db
        return
    db.info[ATOMIC_KEY] = True
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.info.pop(ATOMIC_KEY, None)
