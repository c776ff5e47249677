import uuid

import httpx
from fastapi.testclient import TestClient

from liftlog.auth_client import AuthClient, get_auth_client
from liftlog.main import app
from liftlog.routers.auth import safe_next
from helpers import client_for, new_user


def anon() -> TestClient:
    return client_for()


USER_ID = str(uuid.uuid4())
SESSION_BODY = {
    "access_token": "access-123",
    "refresh_token": "refresh-456",
    "expires_in": 3600,
    "user": {"id": USER_ID, "email": "alice@example.com"},
}


def use_auth(handler):
    """Route the auth dependency to a mocked provider; returns the list of requests seen."""
    seen = []

    def recorder(request):
        seen.append(request)
        return handler(request)

    def override():
        yield AuthClient("http://auth.test", "anon", transport=httpx.MockTransport(recorder))

    app.dependency_overrides[get_auth_client] = override
    return seen


def test_sign_in_sets_cookies_and_redirects():
    use_auth(lambda request: httpx.Response(200, json=SESSION_BODY))
    r = anon().post("/sign-in", data={"email": "alice@example.com", "password": "pw"})
    assert r.status_code == 303
    assert r.headers["location"] == "/"
    set_cookie = r.headers.get_list("set-cookie")
    assert any(c.startswith("sb-access-token=access-123") for c in set_cookie)
    assert any(c.startswith("sb-refresh-token=refresh-456") for c in set_cookie)
    assert all("httponly" in c.lower() for c in set_cookie)


def test_sign_in_missing_fields():
    seen = use_auth(lambda request: httpx.Response(200, json=SESSION_BODY))
    r = anon().post("/sign-in", data={"email": "alice@example.com", "password": ""})
    assert r.status_code == 400
    assert r.json() == {"error": "Email and password are required", "email": "alice@example.com"}
    assert seen == []


def test_sign_in_provider_rejects():
    use_auth(lambda request: httpx.Response(400, json={"error_description": "Invalid login credentials"}))
    r = anon().post("/sign-in", data={"email": "alice@example.com", "password": "nope"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid login credentials", "email": "alice@example.com"}


def test_sign_out_clears_cookies_even_if_provider_fails():
    use_auth(lambda request: httpx.Response(500, json={"msg": "boom"}))
    c = client_for(new_user())
    r = c.get("/sign-out")
    assert r.status_code == 303
    assert r.headers["location"] == "/sign-in"
    cleared = [h for h in r.headers.get_list("set-cookie") if h.startswith("sb-access-token=")]
    assert cleared and ("max-age=0" in cleared[0].lower() or "expires=" in cleared[0].lower())


def test_sign_out_calls_provider_with_token():
    seen = use_auth(lambda request: httpx.Response(204))
    client_for(new_user()).get("/sign-out")
    assert len(seen) == 1
    assert seen[0].url.path == "/auth/v1/logout"
    assert seen[0].headers["authorization"].startswith("Bearer ")


def test_session_anonymous():
    seen = use_auth(lambda request: httpx.Response(200, json={"id": USER_ID}))
    r = anon().get("/session")
    assert r.json() == {"session": None}
    assert seen == []


def test_session_confirmed_by_provider():
    use_auth(lambda request: httpx.Response(200, json={"id": USER_ID, "email": "alice@example.com"}))
    r = client_for(new_user()).get("/session")
    assert r.json() == {"session": {"id": USER_ID, "email": "alice@example.com"}}


def test_session_rejected_by_provider():
    seen = use_auth(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))
    r = client_for(new_user()).get("/session")
    assert r.json() == {"session": None}
    assert len(seen) == 2  # one retry


def test_callback_exchanges_code():
    use_auth(lambda request: httpx.Response(200, json=SESSION_BODY))
    c = TestClient(app, follow_redirects=False, cookies={"sb-code-verifier": "verifier"})
    r = c.get("/auth/callback", params={"code": "abc", "next": "/history"})
    assert r.status_code == 303
    assert r.headers["location"] == "/history"
    assert any(h.startswith("sb-access-token=access-123") for h in r.headers.get_list("set-cookie"))


def test_callback_failure_redirects_with_error():
    use_auth(lambda request: httpx.Response(400, json={"msg": "bad code"}))
    r = anon().get("/auth/callback", params={"code": "abc"})
    assert r.status_code == 303
    assert r.headers["location"] == "/sign-in?error=auth_callback_error"


def test_callback_without_code():
    use_auth(lambda request: httpx.Response(200, json=SESSION_BODY))
    r = anon().get("/auth/callback")
    assert r.headers["location"] == "/sign-in?error=auth_callback_error"


def test_safe_next_only_allows_local_paths():
    assert safe_next("/workout/new") == "/workout/new"
    assert safe_next(None) == "/"
    assert safe_next("https://evil.example") == "/"
    assert safe_next("//evil.example") == "/"
