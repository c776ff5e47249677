from __future__ import annotations
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, select

from liftlog.db import atomic
from liftlog.errors import NotAuthorized, NotFound, ValidationError
from liftlog.models import WorkoutExercise, WorkoutSession, WorkoutSet
from liftlog.repositories.base import BaseRepository
from liftlog.repositories.ownership import OwnershipResolver
from liftlog.schemas.workout_set import EFFORT_MESSAGE, WorkoutSetCreate, WorkoutSetUpdate, has_effort


class WorkoutSetRepository(BaseRepository[WorkoutSet]):
    """
    Sets of a workout exercise. Ownership is two hops away:
    set -> workout exercise -> workout session -> user.
    """
    model = WorkoutSet

    def __init__(self, db, user=None):
        super().__init__(db, user)
        self.ownership = OwnershipResolver(db)

    def _owned_stmt(self):
        return select(WorkoutSet)\
            .join(WorkoutExercise, WorkoutSet.workout_exercise_id == WorkoutExercise.id)\
            .join(WorkoutSession, WorkoutExercise.workout_session_id == WorkoutSession.id)\
            .where(WorkoutSession.user_id == self.user_id)

    # READS
    def list(self, workout_exercise_id: UUID | None = None) -> list[WorkoutSet]:
        stmt = self._owned_stmt()
        if workout_exercise_id is not None:
            stmt = stmt.where(WorkoutSet.workout_exercise_id == workout_exercise_id)
        stmt = stmt.order_by(WorkoutSet.order_index.asc(), WorkoutSet.created_at.asc())
        with self.query_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, set_id: UUID) -> Optional[WorkoutSet]:
        stmt = self._owned_stmt().where(WorkoutSet.id == set_id)
        with self.query_errors("get_by_id"):
            return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def add(self, payload: WorkoutSetCreate) -> WorkoutSet:
        with self.query_errors("add"):
            owned = self.ownership.owns(WorkoutExercise, payload.workout_exercise_id, self.user_id)
        if not owned:
            raise NotAuthorized("Not authorized to add sets to this exercise")
        s = WorkoutSet(**payload.model_dump())
        with self.query_errors("add"):
            return self.add_and_refresh(s)

    def update(self, set_id: UUID, payload: WorkoutSetUpdate) -> WorkoutSet:
        s = self._owned(set_id, "update")
        changes = payload.changes()
        # the effort rule holds for the row as it will be stored, not just the patch
        merged = {f: changes.get(f, getattr(s, f)) for f in ("reps", "calories", "distance")}
        if not has_effort(**merged):
            raise ValidationError(EFFORT_MESSAGE, errors={"reps": EFFORT_MESSAGE})
        with self.query_errors("update"):
            return self.apply_and_refresh(s, changes)

    def delete(self, set_id: UUID) -> None:
        s = self._owned(set_id, "delete")
        with self.query_errors("delete"):
            self.db.delete(s)
            self._commit()

    def delete_many(self, ids: Iterable[UUID], *, workout_session_id: UUID | None = None) -> None:
        """Delete several sets; scoped to one workout when workout_session_id is given."""
        ids = list(dict.fromkeys(ids))
        if not ids:
            return
        with self.query_errors("delete_many"):
            owned = self.ownership.owns_all(WorkoutSet, ids, self.user_id)
            if owned and workout_session_id is not None:
                owned = self.ownership.root_ids(WorkoutSet, ids) == {workout_session_id}
        if not owned:
            raise NotAuthorized("Not authorized to delete one or more sets")
        with self.query_errors("delete_many"), atomic(self.db):
            self.db.execute(
                delete(WorkoutSet).where(WorkoutSet.id.in_(ids))
                                  .execution_options(synchronize_session=False)
            )
        self.db.expire_all()

    def _owned(self, set_id: UUID, action: str) -> WorkoutSet:
        with self.query_errors(action):
            owned = self.ownership.owns(WorkoutSet, set_id, self.user_id)
        if not owned:
            raise NotAuthorized(f"Not authorized to {action} this set")
        with self.query_errors(action):
            s = self.db.get(WorkoutSet, set_id)
        if s is None:
            raise NotFound("Set not found")
        return s
