from typing import Annotated
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field


class CurrentUser(BaseModel):
    """The authenticated user as reported by the hosted auth provider."""
    id: UUID
    email: str | None = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"
    user: CurrentUser | None = None


class SignInForm(BaseModel):
    email: EmailStr
    password: Annotated[str, Field(min_length=1, max_length=256)]
