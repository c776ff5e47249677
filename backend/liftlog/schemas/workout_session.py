import datetime as dt
from typing import ClassVar
from uuid import UUID
from pydantic import BaseModel

from liftlog.schemas.common import NotesStr, PartialUpdate
from liftlog.schemas.workout_exercise import WorkoutExerciseRead
from liftlog.schemas.workout_type import WorkoutTypeRead


class WorkoutSessionCreate(BaseModel):
    workout_type_id: UUID
    date: dt.date
    notes: NotesStr = None


class WorkoutSessionUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("workout_type_id", "date", "is_completed")

    workout_type_id: UUID | None = None
    date: dt.date | None = None
    notes: NotesStr = None
    is_completed: bool | None = None


class WorkoutSessionRead(BaseModel):
    id: UUID
    user_id: UUID
    workout_type_id: UUID
    date: dt.date
    notes: str | None = None
    is_completed: bool
    created_at: dt.datetime
    workout_type: WorkoutTypeRead | None = None
    workout_exercise: list[WorkoutExerciseRead] = []

    model_config = {"from_attributes": True}
