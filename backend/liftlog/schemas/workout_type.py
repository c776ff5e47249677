from uuid import UUID
from pydantic import BaseModel

class WorkoutTypeRead(BaseModel):
    id: UUID
    key: str
    name: str
    icon: str | None = None

    model_config = {"from_attributes": True}
