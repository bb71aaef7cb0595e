"""
Authentication router: Google sign-in exchanged for a backend session token.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from routers.auth_scope import AuthContext, get_auth_context
from routers.errors import http_error
from routers.rate_limit import rate_limit
from services.errors import ServiceError
from services.google_identity import IdentityVerificationError, verify_google_id_token
from services.safe_logging import log_error, log_oauth_error
from services.session_token import create_session_token
from services.users import upsert_google_user, user_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


class GoogleLoginRequest(BaseModel):
    id_token: str
    access_token: Optional[str] = None


@router.post("/google")
async def google_login(
    request: GoogleLoginRequest,
    _rate_limit: None = Depends(rate_limit("auth_google", limit=20, window_seconds=60)),
    db: AsyncSession = Depends(get_db),
):
    """
    Verify a Google ID token, upsert the user and issue a session token.
    New users must complete their profile before using the API.
    """
    try:
        identity = await verify_google_id_token(request.id_token)
    except IdentityVerificationError as exc:
        log_oauth_error(exc)
        raise HTTPException(status_code=400, detail="Invalid Google ID token or missing profile data")
    except ValueError as exc:
        log_error("Google sign-in configuration", exc)
        raise HTTPException(status_code=500, detail="Google sign-in is not configured")

    try:
        user = await upsert_google_user(identity, db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception as exc:
        log_error("Google login", exc)
        raise HTTPException(status_code=500, detail="Failed to sign in")

    session = create_session_token(user.id, user.email)
    completed = user.has_completed_setup()
    return {
        "token": session["token"],
        "expires_at": session["expires_at"],
        "user": user_to_dict(user),
        "display_name_hint": user.generate_display_name(),
        "message": "Login successful" if completed else "Profile setup required",
    }


@router.post("/logout")
async def logout(_auth: AuthContext = Depends(get_auth_context)):
    """Frontend-managed logout acknowledgment endpoint."""
    return {"message": "Logged out successfully"}
