from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt
from jose.exceptions import JWTError
from liftlog.settings import get_settings

# Hosted-auth access tokens are HS256 JWTs signed with the project secret.
DEFAULT_EXPIRE_MINUTES = 60

def create_access_token(
    sub: str,
    *,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Mint a token shaped like the ones the auth provider issues.
    Used by tests and local tooling; production tokens come from the provider.
    """
    s = get_settings()
    now = datetime.now(timezone.utc)
    minutes = DEFAULT_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    exp = now + timedelta(minutes=minutes)
    payload: Dict[str, Any] = {
        "sub": sub,
        "aud": s.JWT_AUDIENCE,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if email:
        payload["email"] = email
    if extra:
        payload.update(extra)
    return jwt.encode(payload, s.SUPABASE_JWT_SECRET, algorithm=s.JWT_ALGORITHM)

def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature, audience and expiration. Raise if token is expired/invalid.
    """
    s = get_settings()
    payload = jwt.decode(
        token,
        s.SUPABASE_JWT_SECRET,
        algorithms=[s.JWT_ALGORITHM],
        audience=s.JWT_AUDIENCE,
        options={
            "verify_signature": True,
            "verify_aud": True,
            "verify_exp": True,
        },
    )
    if "exp" not in payload:
        raise JWTError("Missing exp")
    return payload
