from typing import Annotated, ClassVar
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, BeforeValidator, Field

from liftlog.models.exercise import ExerciseType
from liftlog.schemas.common import NotesStr, OrderIndex, PartialUpdate, blank_to_none
from liftlog.schemas.workout_set import WorkoutSetRead

SnapshotStr = Annotated[
    Annotated[str, Field(min_length=1, max_length=120)] | None,
    BeforeValidator(blank_to_none),
]


class WorkoutExerciseCreate(BaseModel):
    workout_session_id: UUID
    exercise_id: UUID
    order_index: OrderIndex = 0
    notes: NotesStr = None
    # normally taken from the exercise's current name when added
    name_snapshot: SnapshotStr = None


class WorkoutExerciseUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("name_snapshot", "is_completed", "order_index")

    name_snapshot: SnapshotStr = None
    notes: NotesStr = None
    is_completed: bool | None = None
    order_index: OrderIndex | None = None


class WorkoutExerciseRead(BaseModel):
    id: UUID
    workout_session_id: UUID
    exercise_id: UUID | None = None
    name_snapshot: str
    notes: str | None = None
    is_completed: bool
    order_index: int
    created_at: datetime
    exercise_type: ExerciseType | None = None
    workout_set: list[WorkoutSetRead] = []

    model_config = {"from_attributes": True}
