import uuid

from fastapi.testclient import TestClient

from liftlog.main import app
from liftlog.schemas.auth import CurrentUser
from liftlog.security import create_access_token
from liftlog.settings import get_settings


def new_user(email=None) -> CurrentUser:
    uid = uuid.uuid4()
    return CurrentUser(id=uid, email=email or f"u_{uid.hex[:10]}@example.com")


def token_for(user: CurrentUser, **kwargs) -> str:
    return create_access_token(str(user.id), email=user.email, **kwargs)


def client_for(user: CurrentUser | None = None) -> TestClient:
    """A client carrying the user's session cookie (anonymous when user is None)."""
    cookies = {}
    if user is not None:
        cookies[get_settings().AUTH_COOKIE_NAME] = token_for(user)
    return TestClient(app, cookies=cookies, follow_redirects=False)
