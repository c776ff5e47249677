from __future__ import annotations
from typing import Any

from fastapi import status


class LiftlogError(Exception):
    """Base for errors that map onto an HTTP-like status and a readable message."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(LiftlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotAuthorized(LiftlogError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFound(LiftlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(LiftlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid form data"

    def __init__(
        self,
        message: str | None = None,
        *,
        values: dict[str, Any] | None = None,
        errors: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.values = values or {}
        self.errors = errors or {}

    @classmethod
    def from_pydantic(cls, exc, *, values: dict[str, Any] | None = None) -> "ValidationError":
        errors: dict[str, str] = {}
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ())) or "__root__"
            msg = err.get("msg", "invalid")
            # our own validators' messages, without pydantic's "Value error, " prefix
            if err.get("type") == "value_error" and err.get("ctx", {}).get("error"):
                msg = str(err["ctx"]["error"])
            errors.setdefault(field, msg)
        first = next(iter(errors.values()), None)
        return cls(first, values=values, errors=errors)


class QueryError(LiftlogError):
    """The database rejected the operation; the message is diagnostic only."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database query failed"


class SignInRequired(Exception):
    """Raised by strict page loaders; rendered as a redirect to the sign-in page."""

    def __init__(self, location: str = "/sign-in"):
        self.location = location
        super().__init__(location)
