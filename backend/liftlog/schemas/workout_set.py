from datetime import datetime
from uuid import UUID
from typing import Annotated, ClassVar
from pydantic import BaseModel, BeforeValidator, Field, model_validator

from liftlog.schemas.common import OptionalNonNegFloat, OrderIndex, PartialUpdate, blank_to_none

# cardio sets are usually submitted with an empty reps input
Reps = Annotated[int, Field(ge=0), BeforeValidator(lambda v: 0 if blank_to_none(v) is None else v)]

EFFORT_MESSAGE = "A set needs reps, calories or distance greater than zero"


def has_effort(reps: int | None, calories: float | None, distance: float | None) -> bool:
    """Strength sets need reps; cardio sets need calories or distance."""
    return bool((reps or 0) > 0 or (calories or 0) > 0 or (distance or 0) > 0)


class WorkoutSetFields(BaseModel):
    reps: Reps = 0
    weight: OptionalNonNegFloat = None
    calories: OptionalNonNegFloat = None
    distance: OptionalNonNegFloat = None
    order_index: OrderIndex = 0

    @model_validator(mode="after")
    def reps_or_cardio(self):
        if not has_effort(self.reps, self.calories, self.distance):
            raise ValueError(EFFORT_MESSAGE)
        return self


class WorkoutSetCreate(WorkoutSetFields):
    workout_exercise_id: UUID


class WorkoutSetUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("reps", "order_index")

    reps: Reps | None = None
    weight: OptionalNonNegFloat = None
    calories: OptionalNonNegFloat = None
    distance: OptionalNonNegFloat = None
    order_index: OrderIndex | None = None

    @model_validator(mode="after")
    def reps_or_cardio(self):
        # only decidable when the whole measurement is being replaced
        if {"reps", "calories", "distance"} <= self.model_fields_set and not has_effort(
            self.reps, self.calories, self.distance
        ):
            raise ValueError(EFFORT_MESSAGE)
        return self


class WorkoutSetRead(BaseModel):
    id: UUID
    workout_exercise_id: UUID
    reps: int
    weight: float | None = None
    calories: float | None = None
    distance: float | None = None
    order_index: int
    created_at: datetime

    model_config = {"from_attributes": True}
