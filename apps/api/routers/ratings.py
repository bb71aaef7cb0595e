"""Rating router: lifecycle, privacy-filtered listings, sharing and bulk privacy."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import require_complete_profile
from routers.errors import http_error
from services.errors import ServiceError
from services.ratings import (
    create_rating,
    edit_rating,
    list_ratings_by_author,
    list_ratings_by_viewer,
    list_ratings_for_item,
    remove_rating,
)
from services.sharing import bulk_make_private, bulk_remove_viewer, hide_rating, share_rating

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateRatingRequest(BaseModel):
    grade: Optional[float] = None
    note: Optional[str] = ""
    item_id: int
    item_type: str


class UpdateRatingRequest(BaseModel):
    grade: Optional[float] = None
    note: Optional[str] = None
    item_id: Optional[int] = None
    item_type: Optional[str] = None


class ShareRatingRequest(BaseModel):
    user_ids: List[str] = Field(default_factory=list)


class HideRatingRequest(BaseModel):
    user_id: Optional[str] = None
    user_ids: Optional[List[str]] = None


@router.post("/new", status_code=201)
async def create_rating_route(
    request: CreateRatingRequest,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await create_rating(
            author_id=user.id,
            item_type=request.item_type,
            item_id=request.item_id,
            grade=request.grade,
            note=request.note,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to create rating for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to create rating")


@router.put("/bulk/private")
async def make_all_ratings_private(
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    """Remove every viewer from every rating the requester authored."""
    try:
        return await bulk_make_private(user_id=user.id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to make ratings private for user %s", user.id)
        raise HTTPException(status_code=500, detail="Failed to make ratings private")


@router.put("/bulk/unshare/{target_user_id}")
async def remove_user_from_all_shares(
    target_user_id: str,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await bulk_remove_viewer(owner_id=user.id, target_user_id=target_user_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to remove user %s from shares of %s", target_user_id, user.id)
        raise HTTPException(status_code=500, detail="Failed to remove user from shares")


@router.get("/author/{user_id}")
async def get_ratings_by_author(
    user_id: str,
    item_type: Optional[str] = Query(default=None, alias="type"),
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await list_ratings_by_author(
            author_id=user_id,
            requester_id=user.id,
            item_type=item_type,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to list ratings authored by %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch ratings")


@router.get("/viewer/{user_id}")
async def get_ratings_by_viewer(
    user_id: str,
    item_type: Optional[str] = Query(default=None, alias="type"),
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    """Own ratings plus ratings other users shared with the requester."""
    try:
        return await list_ratings_by_viewer(
            user_id=user_id,
            requester_id=user.id,
            item_type=item_type,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to list ratings visible to %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch ratings")


@router.get("/{item_type}/{item_id}")
async def get_ratings_for_item(
    item_type: str,
    item_id: int,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await list_ratings_for_item(
            item_type=item_type,
            item_id=item_id,
            requester_id=user.id,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to list ratings for %s/%s", item_type, item_id)
        raise HTTPException(status_code=500, detail="Failed to fetch ratings")


@router.put("/{rating_id}")
async def update_rating_route(
    rating_id: int,
    request: UpdateRatingRequest,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await edit_rating(
            rating_id=rating_id,
            requester_id=user.id,
            changes=request.model_dump(exclude_unset=True),
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to update rating %s", rating_id)
        raise HTTPException(status_code=500, detail="Failed to update rating")


@router.put("/{rating_id}/share")
async def share_rating_route(
    rating_id: int,
    request: ShareRatingRequest,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await share_rating(
            rating_id=rating_id,
            requester_id=user.id,
            user_ids=request.user_ids,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to share rating %s", rating_id)
        raise HTTPException(status_code=500, detail="Failed to share rating")


@router.put("/{rating_id}/hide")
async def hide_rating_route(
    rating_id: int,
    request: HideRatingRequest,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await hide_rating(
            rating_id=rating_id,
            requester_id=user.id,
            user_ids=request.user_ids,
            user_id=request.user_id,
            db=db,
        )
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to unshare rating %s", rating_id)
        raise HTTPException(status_code=500, detail="Failed to unshare rating")


@router.delete("/{rating_id}")
async def delete_rating_route(
    rating_id: int,
    user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        await remove_rating(rating_id=rating_id, requester_id=user.id, db=db)
        return {"message": "Rating deleted successfully"}
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to delete rating %s", rating_id)
        raise HTTPException(status_code=500, detail="Failed to delete rating")
