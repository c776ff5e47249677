from typing import Annotated, ClassVar
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from liftlog.models.exercise import ExerciseType
from liftlog.schemas.common import NotesStr, PartialUpdate

# Keep max length via Field
ExerciseName = Annotated[str, Field(max_length=120)]


def _name_non_blank(v: str | None) -> str | None:
    if v is None:
        return v
    v2 = v.strip()
    if not v2:
        raise ValueError("Exercise name is required")
    return v2  # trimmed, so the DB gets clean text


class ExerciseCreate(BaseModel):
    name: ExerciseName
    notes: NotesStr = None
    exercise_type: ExerciseType = ExerciseType.strength

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v):
        return _name_non_blank(v)


class ExerciseUpdate(PartialUpdate):
    not_nullable: ClassVar[tuple[str, ...]] = ("name", "exercise_type")

    name: ExerciseName | None = None
    notes: NotesStr = None
    exercise_type: ExerciseType | None = None

    @field_validator("name")
    @classmethod
    def name_non_blank(cls, v):
        return _name_non_blank(v)


class ExerciseRead(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    notes: str | None = None
    exercise_type: ExerciseType
    created_at: datetime

    model_config = {"from_attributes": True}
