"""Current-user routes: profile, account deletion, admin check and share targets."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import require_complete_profile
from routers.errors import http_error
from services.cascade import delete_user_cascade
from services.errors import ServiceError
from services.sharing import list_shareable_users
from services.users import is_user_admin, update_profile, user_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


class UpdateProfileRequest(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    discoverable: Optional[bool] = None


@router.get("/user/me")
async def get_me(user: User = Depends(require_complete_profile)):
    return user_to_dict(user)


@router.patch("/user/me")
async def update_me(
    request: UpdateProfileRequest,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    """Update display name and/or discoverability."""
    try:
        updated = await update_profile(user=user, changes=request.model_dump(exclude_none=True), db=db)
        return user_to_dict(updated)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to update profile for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.delete("/user/me")
async def delete_me(
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    """Delete the account with all ratings and sharing links."""
    user_id = user.id
    try:
        result = await delete_user_cascade(user_id=user_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to delete account %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to delete account")
    return {"message": "Account deleted successfully", **result}


@router.get("/auth/check-admin")
async def check_admin(user: User = Depends(require_complete_profile)):
    return {"is_admin": is_user_admin(user)}


@router.get("/users/shareable")
async def get_shareable_users(
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await list_shareable_users(user_id=user.id, db=db)
    except Exception:
        logger.exception("Failed to list shareable users for %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to fetch users")
