# liftlog/repositories/base.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from liftlog.db import ATOMIC_KEY
from liftlog.errors import NotAuthenticated, QueryError
from liftlog.schemas.auth import CurrentUser

T = TypeVar("T")  # SQLAlchemy model type

log = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Lightweight base for repositories using SQLAlchemy 2.0 style.

    A repository is built per request with that request's session and user.
    The user is only demanded (require_user) by the operations that need it.
    """
    model: type[T]

    def __init__(self, db: Session, user: CurrentUser | None = None):
        self.db = db
        self.user = user

    def require_user(self) -> CurrentUser:
        if self.user is None:
            raise NotAuthenticated()
        return self.user

    @property
    def user_id(self) -> UUID:
        return self.require_user().id

    @contextmanager
    def query_errors(self, op: str) -> Iterator[None]:
        """Turn database failures into QueryError, logging them once."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            log.error("[%s.%s] %s", type(self).__name__, op, e)
            raise QueryError(str(getattr(e, "orig", None) or e)) from e

    def _commit(self) -> None:
        # inside atomic() the caller commits once for the whole unit
        if self.db.info.get(ATOMIC_KEY):
            self.db.flush()
        else:
            self.db.commit()

    def add_and_refresh(self, entity: T) -> T:
        self.db.add(entity)
        self._commit()
        self.db.refresh(entity)
        return entity

    def apply_and_refresh(self, entity: T, changes: dict[str, Any]) -> T:
        for field, value in changes.items():
            setattr(entity, field, value)
        self._commit()
        self.db.refresh(entity)
        return entity
