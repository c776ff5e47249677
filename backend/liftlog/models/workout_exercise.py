import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, Uuid, func, false
from liftlog.db import Base
from liftlog.models.exercise import ExerciseType, utcnow

class WorkoutExercise(Base):
    """
    An exercise as performed inside one workout session.

    `name_snapshot` is copied from the exercise when it is added, so renaming or
    deleting the exercise later leaves the history untouched.
    """
    __tablename__ = "workout_exercise"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workout_session_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workout_session.id"), index=True)
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("exercise.id", ondelete="SET NULL"), nullable=True
    )
    name_snapshot: Mapped[str] = mapped_column(String(120), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    workout_session = relationship("WorkoutSession", back_populates="workout_exercise")
    exercise = relationship("Exercise")
    workout_set = relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        order_by="WorkoutSet.order_index",
        passive_deletes="all",
    )

    @property
    def exercise_type(self) -> ExerciseType | None:
        return self.exercise.exercise_type if self.exercise is not None else None
