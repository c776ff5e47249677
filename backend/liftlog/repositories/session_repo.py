from __future__ import annotations
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from liftlog.db import atomic
from liftlog.errors import NotAuthorized
from liftlog.models import WorkoutExercise, WorkoutSession, WorkoutSet
from liftlog.repositories.base import BaseRepository
from liftlog.schemas.workout_session import WorkoutSessionCreate, WorkoutSessionUpdate

# Same shape for every session read: type, exercises (with source exercise) and sets.
SESSION_LOAD = (
    selectinload(WorkoutSession.workout_type),
    selectinload(WorkoutSession.workout_exercise).selectinload(WorkoutExercise.workout_set),
    selectinload(WorkoutSession.workout_exercise).selectinload(WorkoutExercise.exercise),
)


class WorkoutSessionRepository(BaseRepository[WorkoutSession]):
    model = WorkoutSession

    # READS
    def list(self) -> list[WorkoutSession]:
        """Newest workouts first; children come ordered by order_index."""
        stmt = select(WorkoutSession).options(*SESSION_LOAD)\
                                     .where(WorkoutSession.user_id == self.user_id)\
                                     .order_by(WorkoutSession.date.desc(), WorkoutSession.created_at.desc())
        with self.query_errors("list"):
            return list(self.db.execute(stmt).scalars().all())

    def get_by_id(self, session_id: UUID) -> Optional[WorkoutSession]:
        stmt = select(WorkoutSession).options(*SESSION_LOAD)\
                                     .where(WorkoutSession.id == session_id,
                                            WorkoutSession.user_id == self.user_id)
        with self.query_errors("get_by_id"):
            return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, session_id: UUID) -> bool:
        stmt = select(WorkoutSession.id).where(WorkoutSession.id == session_id,
                                               WorkoutSession.user_id == self.user_id)
        with self.query_errors("exists"):
            return self.db.execute(stmt).scalar_one_or_none() is not None

    # WRITES
    def create(self, payload: WorkoutSessionCreate) -> WorkoutSession:
        sess = WorkoutSession(user_id=self.user_id, is_completed=False, **payload.model_dump())
        with self.query_errors("create"):
            return self.add_and_refresh(sess)

    def update(self, session_id: UUID, payload: WorkoutSessionUpdate) -> WorkoutSession:
        sess = self._owned(session_id, "update")
        with self.query_errors("update"):
            return self.apply_and_refresh(sess, payload.changes())

    def toggle_complete(self, session_id: UUID, is_completed: bool) -> WorkoutSession:
        return self.update(session_id, WorkoutSessionUpdate(is_completed=is_completed))

    def delete(self, session_id: UUID) -> None:
        """Remove the session and its children: sets, then exercises, then the session."""
        self._owned(session_id, "delete")
        exercise_ids = select(WorkoutExercise.id).where(WorkoutExercise.workout_session_id == session_id)
        with self.query_errors("delete"), atomic(self.db):
            self.db.execute(
                delete(WorkoutSet).where(WorkoutSet.workout_exercise_id.in_(exercise_ids))
                                  .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(WorkoutExercise).where(WorkoutExercise.workout_session_id == session_id)
                                       .execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(WorkoutSession).where(WorkoutSession.id == session_id)
                                      .execution_options(synchronize_session=False)
            )
        self.db.expire_all()

    def _owned(self, session_id: UUID, action: str) -> WorkoutSession:
        stmt = select(WorkoutSession).where(WorkoutSession.id == session_id,
                                            WorkoutSession.user_id == self.user_id)
        with self.query_errors(action):
            sess = self.db.execute(stmt).scalar_one_or_none()
        if sess is None:
            raise NotAuthorized(f"Not authorized to {action} this workout session")
        return sess
