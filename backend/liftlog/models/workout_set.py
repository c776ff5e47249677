import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, Uuid, func
from liftlog.db import Base
from liftlog.models.exercise import utcnow

class WorkoutSet(Base):
    __tablename__ = "workout_set"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    workout_exercise_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workout_exercise.id"), index=True)
    reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    weight: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    calories: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    distance: Mapped[float | None] = mapped_column(Numeric(10, 3, asdecimal=False), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    workout_exercise = relationship("WorkoutExercise", back_populates="workout_set")
