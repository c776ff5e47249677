from __future__ import annotations
from typing import Optional
from uuid import UUID

from sqlalchemy import select

from liftlog.errors import NotAuthorized
from liftlog.models import Exercise
from liftlog.repositories.base import BaseRepository
from liftlog.schemas.exercise import ExerciseCreate, ExerciseUpdate


class ExerciseRepository(BaseRepository[Exercise]):
    """The current user's exercise definitions."""
    model = Exercise

    # READS
    def list(self) -> list[Exercise]:
        stmt = select(Exercise).where(Exercise.user_id == self.user_id)\
                               .order_by(Exercise.created_at.desc())
        with self.query_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, exercise_id: UUID) -> Optional[Exercise]:
        """None when the exercise is missing or belongs to someone else."""
        stmt = select(Exercise).where(Exercise.id == exercise_id, Exercise.user_id == self.user_id)
        with self.query_errors("get_by_id"):
            return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def create(self, payload: ExerciseCreate) -> Exercise:
        exercise = Exercise(user_id=self.user_id, **payload.model_dump())
        with self.query_errors("create"):
            return self.add_and_refresh(exercise)

    def update(self, exercise_id: UUID, payload: ExerciseUpdate) -> Exercise:
        exercise = self._owned(exercise_id, "update")
        with self.query_errors("update"):
            return self.apply_and_refresh(exercise, payload.changes())

    def delete(self, exercise_id: UUID) -> None:
        # workouts keep their name_snapshot; the FK is cleared by the database
        exercise = self._owned(exercise_id, "delete")
        with self.query_errors("delete"):
            self.db.delete(exercise)
            self._commit()

    def _owned(self, exercise_id: UUID, action: str) -> Exercise:
        exercise = self.get_by_id(exercise_id)
        if exercise is None:
            raise NotAuthorized(f"Not authorized to {action} this exercise")
        return exercise
