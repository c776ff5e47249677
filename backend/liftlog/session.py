"""Resolve the authenticated user for one request from its session cookie."""
from __future__ import annotations
import logging
from uuid import UUID

from fastapi import Request
from jose.exceptions import ExpiredSignatureError, JWTError

from liftlog.errors import NotAuthenticated
from liftlog.schemas.auth import CurrentUser
from liftlog.security import decode_token
from liftlog.settings import get_settings

log = logging.getLogger(__name__)


def read_access_token(request: Request) -> str | None:
    s = get_settings()
    token = request.cookies.get(s.AUTH_COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value:
        return value.strip()
    return None


def get_current_user(request: Request) -> CurrentUser:
    """
    Return the user behind the request's session token.

    Nothing is cached: every request resolves its own user, so this must be
    called once per request by whatever needs it.
    """
    token = read_access_token(request)
    if not token:
        raise NotAuthenticated()
    try:
        payload = decode_token(token)
    except ExpiredSignatureError:
        raise NotAuthenticated("Session expired")
    except JWTError as e:
        log.info("rejected session token: %s", e)
        raise NotAuthenticated()

    sub = payload.get("sub")
    if not sub:
        raise NotAuthenticated()
    try:
        user_id = UUID(str(sub))
    except ValueError:
        raise NotAuthenticated()
    return CurrentUser(id=user_id, email=payload.get("email"))
