from __future__ import annotations
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from liftlog.db import atomic
from liftlog.errors import NotAuthorized, NotFound
from liftlog.models import Exercise, WorkoutExercise, WorkoutSession, WorkoutSet
from liftlog.repositories.base import BaseRepository
from liftlog.repositories.ownership import OwnershipResolver
from liftlog.schemas.workout_exercise import WorkoutExerciseCreate, WorkoutExerciseUpdate

EXERCISE_LOAD = (
    selectinload(WorkoutExercise.workout_set),
    selectinload(WorkoutExercise.exercise),
)


class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    """
    Exercises inside a workout session (not the exercise definitions).

    These rows carry no user_id; every mutation first proves the current user
    owns the parent workout session.
    """
    model = WorkoutExercise

    def __init__(self, db, user=None):
        super().__init__(db, user)
        self.ownership = OwnershipResolver(db)

    def _owned_stmt(self):
        return select(WorkoutExercise).options(*EXERCISE_LOAD)\
            .join(WorkoutSession, WorkoutExercise.workout_session_id == WorkoutSession.id)\
            .where(WorkoutSession.user_id == self.user_id)

    # READS
    def list(self, workout_session_id: UUID | None = None) -> list[WorkoutExercise]:
        stmt = self._owned_stmt()
        if workout_session_id is not None:
            stmt = stmt.where(WorkoutExercise.workout_session_id == workout_session_id)
        stmt = stmt.order_by(WorkoutExercise.order_index.asc(), WorkoutExercise.created_at.asc())
        with self.query_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, workout_exercise_id: UUID) -> Optional[WorkoutExercise]:
        stmt = self._owned_stmt().where(WorkoutExercise.id == workout_exercise_id)
        with self.query_errors("get_by_id"):
            return self.db.execute(stmt).scalar_one_or_none()

    # WRITES
    def add(self, payload: WorkoutExerciseCreate) -> WorkoutExercise:
        """
        Add an exercise to a workout. The exercise's current name is copied
        into name_snapshot unless the caller supplies one.
        """
        uid = self.user_id
        with self.query_errors("add"):
            if not self.ownership.owns(WorkoutSession, payload.workout_session_id, uid):
                raise NotAuthorized("Not authorized to access this workout session")
            source = self.db.execute(
                select(Exercise).where(Exercise.id == payload.exercise_id, Exercise.user_id == uid)
            ).scalar_one_or_none()
        if source is None:
            raise NotAuthorized("Not authorized to use this exercise")

        we = WorkoutExercise(
            workout_session_id=payload.workout_session_id,
            exercise_id=source.id,
            name_snapshot=payload.name_snapshot or source.name,
            order_index=payload.order_index,
            notes=payload.notes,
            is_completed=False,
        )
        with self.query_errors("add"):
            return self.add_and_refresh(we)

    def update(self, workout_exercise_id: UUID, payload: WorkoutExerciseUpdate) -> WorkoutExercise:
        we = self._owned(workout_exercise_id, "update")
        with self.query_errors("update"):
            return self.apply_and_refresh(we, payload.changes())

    def toggle_complete(self, workout_exercise_id: UUID, is_completed: bool) -> WorkoutExercise:
        return self.update(workout_exercise_id, WorkoutExerciseUpdate(is_completed=is_completed))

    def delete(self, workout_exercise_id: UUID) -> None:
        self._owned(workout_exercise_id, "delete")
        self._delete_ids([workout_exercise_id], "delete")

    def delete_many(self, ids: Iterable[UUID], *, workout_session_id: UUID | None = None) -> None:
        """
        Delete several workout exercises and their sets.
        Ownership of all parent sessions is resolved in one batch first; with
        workout_session_id every exercise must also belong to that workout.
        """
        ids = list(dict.fromkeys(ids))
        if not ids:
            return
        with self.query_errors("delete_many"):
            owned = self.ownership.owns_all(WorkoutExercise, ids, self.user_id)
            if owned and workout_session_id is not None:
                owned = self.ownership.root_ids(WorkoutExercise, ids) == {workout_session_id}
        if not owned:
            raise NotAuthorized("Not authorized to delete one or more exercises")
        self._delete_ids(ids, "delete_many")

    def _delete_ids(self, ids: list[UUID], op: str) -> None:
        with self.query_errors(op), atomic(self.db):
            self.db.execute(
                delete(WorkoutSet).where(WorkoutSet.workout_exercise_id.in_(ids))
                                  .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(WorkoutExercise).where(WorkoutExercise.id.in_(ids))
                                       .execution_options(synchronize_session=False)
            )
        self.db.expire_all()

    def _owned(self, workout_exercise_id: UUID, action: str) -> WorkoutExercise:
        with self.query_errors(action):
            if not self.ownership.owns(WorkoutExercise, workout_exercise_id, self.user_id):
                raise NotAuthorized(f"Not authorized to {action} this exercise")
            we = self.db.get(WorkoutExercise, workout_exercise_id)
        if we is None:
            raise NotFound("Workout exercise not found")
        return we
