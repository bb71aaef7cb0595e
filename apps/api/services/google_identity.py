"""Google ID token verification against Google's tokeninfo endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from config import require_google_client_id, settings


class IdentityVerificationError(ValueError):
    """Raised when a Google ID token cannot be trusted or lacks profile data."""


@dataclass
class GoogleIdentity:
    subject_id: str
    email: str
    full_name: str
    avatar_url: Optional[str] = None


def _identity_from_claims(claims: Dict[str, Any]) -> GoogleIdentity:
    subject = str(claims.get("sub") or "").strip()
    email = str(claims.get("email") or "").strip()
    name = str(claims.get("name") or "").strip()
    if not subject or not email or not name:
        raise IdentityVerificationError("incomplete user profile")

    email_verified = str(claims.get("email_verified", "true")).strip().lower()
    if email_verified not in {"true", "1"}:
        raise IdentityVerificationError("email address is not verified")

    picture = str(claims.get("picture") or "").strip() or None
    return GoogleIdentity(subject_id=subject, email=email, full_name=name, avatar_url=picture)


async def verify_google_id_token(
    id_token: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> GoogleIdentity:
    """Verify authenticity and audience of a Google ID token and return its profile."""
    token = str(id_token or "").strip()
    if not token:
        raise IdentityVerificationError("missing id token")

    expected_audience = require_google_client_id()
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.GOOGLE_TOKENINFO_TIMEOUT_SECONDS)
    try:
        response = await http.get(settings.GOOGLE_TOKENINFO_URL, params={"id_token": token})
    except httpx.HTTPError as exc:
        raise IdentityVerificationError("token verification request failed") from exc
    finally:
        if owns_client:
            await http.aclose()

    if response.status_code != 200:
        raise IdentityVerificationError("invalid token")

    try:
        claims = response.json()
    except ValueError as exc:
        raise IdentityVerificationError("invalid token payload") from exc

    if str(claims.get("aud") or "") != expected_audience:
        raise IdentityVerificationError("unauthorized token")

    return _identity_from_claims(claims)
