"""Signed login tokens issued after Google sign-in.

The token only identifies the user (``sub``) and binds itself to this API via
``iss`` and ``aud``. Profile completion and the admin flag are not claims;
they are read from the database on every request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from config import settings


SESSION_TOKEN_TYPE = "alc_session"
SESSION_TOKEN_ISSUER = "alacarte-api"
SESSION_TOKEN_AUDIENCE = "alacarte-clients"
DEFAULT_SESSION_HOURS = 24


def create_session_token(
    user_id: str,
    email: Optional[str] = None,
    expires_hours: Optional[int] = None,
) -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    ttl_hours = max(int(expires_hours or settings.JWT_EXPIRATION_HOURS or DEFAULT_SESSION_HOURS), 1)
    expires_at = int((now + timedelta(hours=ttl_hours)).timestamp())
    claims: Dict[str, Any] = {
        "sub": user_id,
        "type": SESSION_TOKEN_TYPE,
        "iss": SESSION_TOKEN_ISSUER,
        "aud": SESSION_TOKEN_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": expires_at,
    }
    if email:
        claims["email"] = email

    return {
        "token": jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM),
        "expires_at": expires_at,
    }


def decode_session_token(token: str) -> Dict[str, Any]:
    """Verify signature, expiry, issuer and audience; return the claims."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=SESSION_TOKEN_AUDIENCE,
            issuer=SESSION_TOKEN_ISSUER,
        )
    except JWTError as exc:
        raise ValueError("Invalid or expired session token") from exc

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise ValueError("Invalid session token type")
    if not str(payload.get("sub") or "").strip():
        raise ValueError("Session token missing subject")
    return payload
