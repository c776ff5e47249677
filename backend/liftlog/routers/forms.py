"""Helpers shared by form-action handlers: reading, validating and failing."""
from __future__ import annotations
import logging
from typing import Any, Optional, TypeVar

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from liftlog.errors import LiftlogError, ValidationError

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


async def form_values(request: Request) -> dict[str, str]:
    """Submitted form fields as plain strings (file uploads are ignored)."""
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}


def validate(schema: type[M], values: dict[str, Any], **extra: Any) -> M:
    try:
        return schema.model_validate({**values, **extra})
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, values=values)


def fail(
    status_code: int,
    error: str,
    *,
    action: Optional[str] = None,
    values: Optional[dict[str, Any]] = None,
    **extra: Any,
) -> JSONResponse:
    body: dict[str, Any] = {"error": error}
    if action:
        body["action"] = action
    if values is not None:
        body["values"] = values
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def failure(exc: LiftlogError, *, action: str, values: Optional[dict[str, Any]] = None) -> JSONResponse:
    """Structured failure payload for an action, echoing what was submitted."""
    if exc.status_code >= 500:
        log.error("action %s failed: %s", action, exc.message)
    else:
        log.info("action %s rejected (%s): %s", action, exc.status_code, exc.message)
    extra: dict[str, Any] = {}
    if isinstance(exc, ValidationError) and exc.errors:
        extra["errors"] = exc.errors
    return fail(exc.status_code, exc.message, action=action, values=values, **extra)


def see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def dump(schema: type[BaseModel], obj: Any) -> dict[str, Any]:
    return schema.model_validate(obj).model_dump(mode="json")
