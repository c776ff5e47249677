from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from liftlog.errors import NotAuthenticated
from liftlog.schemas.auth import AuthSession, CurrentUser
from liftlog.settings import get_settings

log = logging.getLogger(__name__)


class AuthClient:
    """
    Thin client for the hosted auth service (GoTrue REST API).

    Every call is bounded by AUTH_TIMEOUT_SECONDS. Failures surface as
    NotAuthenticated carrying the provider's message.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.SUPABASE_URL).rstrip("/")
        key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY

        headers: Dict[str, str] = {"Accept": "application/json"}
        if key:
            headers["apikey"] = key
        self._client = httpx.Client(
            base_url=f"{self.base_url}/auth/v1",
            headers=headers,
            timeout=settings.AUTH_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AuthClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- token grants -----------------------------------------------------

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = self._post(
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return _session_from(data)

    def exchange_code_for_session(self, code: str, code_verifier: Optional[str] = None) -> AuthSession:
        body: Dict[str, Any] = {"auth_code": code}
        if code_verifier:
            body["code_verifier"] = code_verifier
        data = self._post("/token", params={"grant_type": "pkce"}, json=body)
        return _session_from(data)

    def sign_out(self, access_token: str) -> None:
        self._post("/logout", headers=_bearer(access_token))

    # --- user lookup ------------------------------------------------------

    def get_user(self, access_token: str, *, retries: int = 1) -> CurrentUser:
        """
        Ask the provider who owns `access_token`.

        A sign-in that has just completed may not be visible yet, so one failed
        lookup is retried after yielding once.
        """
        attempt = 0
        while True:
            try:
                data = self._get("/user", headers=_bearer(access_token))
                return _user_from(data)
            except NotAuthenticated:
                if attempt >= retries:
                    raise
                attempt += 1
                time.sleep(0)

    # --- transport --------------------------------------------------------

    def _get(self, path: str, **kwargs) -> Dict[str, Any]:
        return self._request("GET", path, **kwargs)

    def _post(self, path: str, **kwargs) -> Dict[str, Any]:
        return self._request("POST", path, **kwargs)

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.error("auth service %s %s failed: %s", method, path, e)
            raise NotAuthenticated("Authentication service unavailable") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            log.info("auth service %s %s -> %s: %s", method, path, resp.status_code, message)
            raise NotAuthenticated(message)
        if not resp.content:
            return {}
        return resp.json()


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or "Authentication failed"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return "Authentication failed"


def _user_from(data: Dict[str, Any]) -> CurrentUser:
    if not data.get("id"):
        raise NotAuthenticated()
    return CurrentUser(id=data["id"], email=data.get("email"))


def _session_from(data: Dict[str, Any]) -> AuthSession:
    if not data.get("access_token"):
        raise NotAuthenticated("Authentication failed")
    user = data.get("user")
    return AuthSession(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_in=data.get("expires_in"),
        token_type=data.get("token_type") or "bearer",
        user=_user_from(user) if user else None,
    )


def get_auth_client():
    client = AuthClient()
    try:
        yield client
    finally:
        client.close()
