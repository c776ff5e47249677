from __future__ import annotations
from typing import Optional
from uuid import UUID

from sqlalchemy import select

from liftlog.models import WorkoutType
from liftlog.repositories.base import BaseRepository


class WorkoutTypeRepository(BaseRepository[WorkoutType]):
    """Workout types are shared by all users, so nothing here checks ownership."""
    model = WorkoutType

    def list(self) -> list[WorkoutType]:
        stmt = select(WorkoutType).order_by(WorkoutType.name.asc())
        with self.query_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, type_id: UUID) -> Optional[WorkoutType]:
        with self.query_errors("get_by_id"):
            return self.db.get(WorkoutType, type_id)

    def get_by_key(self, key: str) -> Optional[WorkoutType]:
        stmt = select(WorkoutType).where(WorkoutType.key == key)
        with self.query_errors("get_by_key"):
            return self.db.execute(stmt).scalar_one_or_none()
