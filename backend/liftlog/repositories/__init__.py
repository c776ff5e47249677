from __future__ import annotations
from contextlib import AbstractContextManager

from sqlalchemy.orm import Session

from liftlog.db import atomic
from liftlog.repositories.exercise_repo import ExerciseRepository
from liftlog.repositories.ownership import OwnershipResolver
from liftlog.repositories.session_repo import WorkoutSessionRepository
from liftlog.repositories.workout_exercise_repo import WorkoutExerciseRepository
from liftlog.repositories.workout_set_repo import WorkoutSetRepository
from liftlog.repositories.workout_type_repo import WorkoutTypeRepository
from liftlog.schemas.auth import CurrentUser


class Repositories:
    """All repositories for one request, sharing its session and user."""

    def __init__(self, db: Session, user: CurrentUser | None):
        self.db = db
        self.user = user
        self.exercises = ExerciseRepository(db, user)
        self.workout_sessions = WorkoutSessionRepository(db, user)
        self.workout_exercises = WorkoutExerciseRepository(db, user)
        self.workout_sets = WorkoutSetRepository(db, user)
        self.workout_types = WorkoutTypeRepository(db, user)

    def atomic(self) -> AbstractContextManager[Session]:
        return atomic(self.db)


__all__ = [
    "Repositories",
    "ExerciseRepository",
    "OwnershipResolver",
    "WorkoutSessionRepository",
    "WorkoutExerciseRepository",
    "WorkoutSetRepository",
    "WorkoutTypeRepository",
]
