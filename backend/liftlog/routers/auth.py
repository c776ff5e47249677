import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from liftlog.auth_client import AuthClient, get_auth_client
from liftlog.errors import NotAuthenticated, ValidationError
from liftlog.routers.forms import fail, form_values, see_other, validate
from liftlog.schemas.auth import AuthSession, SignInForm
from liftlog.session import read_access_token
from liftlog.settings import get_settings

log = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def set_session_cookies(response: Response, session: AuthSession) -> None:
    s = get_settings()
    common = {"httponly": True, "samesite": "lax", "secure": s.COOKIE_SECURE, "path": "/"}
    response.set_cookie(s.AUTH_COOKIE_NAME, session.access_token, max_age=session.expires_in, **common)
    if session.refresh_token:
        response.set_cookie(s.REFRESH_COOKIE_NAME, session.refresh_token, **common)


def clear_session_cookies(response: Response) -> None:
    s = get_settings()
    response.delete_cookie(s.AUTH_COOKIE_NAME, path="/")
    response.delete_cookie(s.REFRESH_COOKIE_NAME, path="/")


def safe_next(next_url: Optional[str]) -> str:
    # only same-site relative paths
    if not next_url or not next_url.startswith("/") or next_url.startswith("//"):
        return "/"
    return next_url


@router.get("/session")
def layout_session(request: Request, auth: AuthClient = Depends(get_auth_client)):
    """Layout data: who is signed in, confirmed with the auth provider."""
    token = read_access_token(request)
    if not token:
        return {"session": None}
    try:
        user = auth.get_user(token)
    except NotAuthenticated:
        return {"session": None}
    return {"session": user.model_dump(mode="json")}


@router.post("/sign-in")
def sign_in(values: dict = Depends(form_values), auth: AuthClient = Depends(get_auth_client)):
    email = values.get("email", "")
    try:
        form = validate(SignInForm, {"email": email.strip(), "password": values.get("password", "")})
    except ValidationError:
        return fail(400, "Email and password are required", email=email)
    try:
        session = auth.sign_in_with_password(form.email, form.password)
    except NotAuthenticated as e:
        return fail(400, e.message, email=email)

    response = see_other("/")
    set_session_cookies(response, session)
    return response


@router.get("/sign-out")
def sign_out(request: Request, auth: AuthClient = Depends(get_auth_client)):
    token = read_access_token(request)
    if token:
        try:
            auth.sign_out(token)
        except NotAuthenticated as e:
            # the local cookies are cleared either way
            log.warning("remote sign-out failed: %s", e.message)
    response = see_other("/sign-in")
    clear_session_cookies(response)
    return response


@router.get("/auth/callback")
def auth_callback(
    request: Request,
    code: Optional[str] = None,
    next: Optional[str] = None,
    auth: AuthClient = Depends(get_auth_client),
):
    s = get_settings()
    if code:
        verifier = request.cookies.get(s.CODE_VERIFIER_COOKIE_NAME)
        try:
            session = auth.exchange_code_for_session(code, verifier)
        except NotAuthenticated as e:
            log.info("auth callback rejected: %s", e.message)
        else:
            response = see_other(safe_next(next))
            set_session_cookies(response, session)
            response.delete_cookie(s.CODE_VERIFIER_COOKIE_NAME, path="/")
            return response
    return see_other("/sign-in?error=auth_callback_error")
