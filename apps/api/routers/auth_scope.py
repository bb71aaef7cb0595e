"""Authentication dependencies for API user scoping."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from services.safe_logging import log_auth_failure, sanitize_token
from services.session_token import decode_session_token
from services.users import is_user_admin


auth_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    email: Optional[str] = None


async def get_auth_context(
    credentials: HTTPAuthorizationCredentials = Depends(auth_scheme),
) -> AuthContext:
    """Resolve authenticated user from Bearer session token."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing Bearer session token.")

    try:
        payload = decode_session_token(credentials.credentials)
    except ValueError as exc:
        log_auth_failure(f"{exc} token={sanitize_token(credentials.credentials)}")
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return AuthContext(
        user_id=str(payload.get("sub", "")),
        email=str(payload.get("email", "")) or None,
    )


async def get_current_user(
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Partial authentication: token is valid and the user still exists."""
    user = await db.get(User, auth.user_id)
    if user is None:
        log_auth_failure("user not found")
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def require_complete_profile(user: User = Depends(get_current_user)) -> User:
    """Full authentication: display name chosen and profile setup finished."""
    if not user.has_completed_setup():
        raise HTTPException(status_code=403, detail="Profile setup required")
    return user


async def require_admin(user: User = Depends(require_complete_profile)) -> User:
    if not is_user_admin(user):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
