from typing import Annotated, Any
from uuid import UUID
from pydantic import BaseModel, BeforeValidator, Json, model_validator

from liftlog.schemas.common import NotesStr, OrderIndex, blank_to_none
from liftlog.schemas.workout_session import WorkoutSessionUpdate
from liftlog.schemas.workout_set import EFFORT_MESSAGE, WorkoutSetUpdate, has_effort


def _blank_to_empty_json(v: Any) -> Any:
    return "[]" if blank_to_none(v) is None else v


IdList = Annotated[Json[list[UUID]], BeforeValidator(_blank_to_empty_json)]


class SetEdit(WorkoutSetUpdate):
    """
    A set row from the workout editor. With an id it patches that set (only the
    fields sent); without one it is a new set and must carry some effort.
    """
    id: UUID | None = None

    @model_validator(mode="after")
    def new_sets_need_effort(self):
        if self.id is None and not has_effort(self.reps, self.calories, self.distance):
            raise ValueError(EFFORT_MESSAGE)
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"id"})


class ExerciseEdit(BaseModel):
    """An exercise row from the workout editor; no id means it is being added."""
    id: UUID | None = None
    exercise_id: UUID | None = None
    notes: NotesStr = None
    is_completed: bool = False
    order_index: OrderIndex = 0
    sets: list[SetEdit] = []

    @model_validator(mode="after")
    def new_rows_need_exercise(self):
        if self.id is None and self.exercise_id is None:
            raise ValueError("exercise_id is required for new exercises")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"id", "exercise_id", "sets"})


ExerciseEdits = Annotated[Json[list[ExerciseEdit]], BeforeValidator(_blank_to_empty_json)]

SAVE_ONLY_FIELDS = {"removed_set_ids", "removed_exercise_ids", "exercises"}


class SaveWorkoutForm(WorkoutSessionUpdate):
    """
    Bulk "save workout" submission.

    Session columns arrive as plain form fields; removed child ids and the edited
    exercise list arrive JSON-encoded. Everything is parsed here, before any row
    is touched, so a malformed field means nothing is deleted.
    """
    removed_set_ids: IdList = []
    removed_exercise_ids: IdList = []
    exercises: ExerciseEdits = []

    def session_changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude=SAVE_ONLY_FIELDS)
