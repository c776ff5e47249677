import uuid
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Uuid, func, Enum as SAEnum
from liftlog.db import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class ExerciseType(str, Enum):
    strength = "strength"
    cardio = "cardio"

class Exercise(Base):
    __tablename__ = "exercise"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    exercise_type: Mapped[ExerciseType] = mapped_column(
        SAEnum(ExerciseType, name="exercise_type", native_enum=False, length=16),
        nullable=False,
        default=ExerciseType.strength,
        server_default=ExerciseType.strength.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
