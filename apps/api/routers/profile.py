"""Profile setup routes, reachable before the profile is complete."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import get_current_user
from routers.errors import http_error
from routers.rate_limit import rate_limit
from services.errors import ServiceError
from services.users import complete_profile, is_display_name_available, user_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


class CompleteProfileRequest(BaseModel):
    display_name: str = Field(min_length=2, max_length=50)
    discoverable: bool = True


@router.post("/complete")
async def complete_profile_route(
    request: CompleteProfileRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        updated = await complete_profile(
            user=user,
            display_name=request.display_name,
            discoverable=request.discoverable,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to complete profile for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to complete profile")

    return {"message": "Profile completed successfully", "user": user_to_dict(updated)}


@router.get("/check-display-name")
async def check_display_name(
    display_name: str = Query(...),
    _rate_limit: None = Depends(rate_limit("display_name_check", limit=60, window_seconds=60)),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        available = await is_display_name_available(display_name, db, exclude_user_id=user.id)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to check display name for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to check display name")
    return {"available": available}
