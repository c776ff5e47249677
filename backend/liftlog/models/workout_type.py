import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Uuid
from liftlog.db import Base

class WorkoutType(Base):
    """Global catalogue entry (strength, cardio, ...). Read-only for the app."""
    __tablename__ = "workout_type"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    key: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(40), nullable=True)
