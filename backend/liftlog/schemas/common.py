from typing import Annotated, Any, ClassVar
from pydantic import BaseModel, BeforeValidator, Field, StringConstraints, model_validator


def blank_to_none(v: Any) -> Any:
    # HTML forms submit "" for untouched optional inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


NotesStr = Annotated[
    Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)] | None,
    BeforeValidator(blank_to_none),
]
OrderIndex = Annotated[int, Field(ge=0)]
NonNegFloat = Annotated[float, Field(ge=0, le=100000)]
OptionalNonNegFloat = Annotated[NonNegFloat | None, BeforeValidator(blank_to_none)]


class PartialUpdate(BaseModel):
    """
    Base for patch payloads: only fields that were actually supplied are applied
    (see `changes()`), and columns listed in `not_nullable` may be omitted but
    never explicitly cleared.
    """
    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def no_null_for_required_columns(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be empty")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
