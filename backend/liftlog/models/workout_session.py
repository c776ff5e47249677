import datetime as dt
import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Text, Uuid, func, false
from liftlog.db import Base
from liftlog.models.exercise import utcnow

class WorkoutSession(Base):
    __tablename__ = "workout_session"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, index=True, nullable=False)
    workout_type_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("workout_type.id"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    workout_type = relationship("WorkoutType")
    # no ORM cascade: children are removed explicitly, sets before exercises
    workout_exercise = relationship(
        "WorkoutExercise",
        back_populates="workout_session",
        order_by="WorkoutExercise.order_index",
        passive_deletes="all",
    )
