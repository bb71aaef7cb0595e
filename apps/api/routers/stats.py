"""Community statistics router."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import require_complete_profile
from routers.errors import http_error
from services.errors import ServiceError
from services.stats import get_community_stats

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/community/{item_type}/{item_id}")
async def community_stats(
    item_type: str,
    item_id: int,
    _user: User = Depends(require_complete_profile),
    db: AsyncSession = Depends(get_db),
):
    """Anonymous count and average grade for an item."""
    try:
        stats = await get_community_stats(item_type=item_type, item_id=item_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to compute community stats for %s/%s", item_type, item_id)
        raise HTTPException(status_code=500, detail="Failed to fetch community stats")

    return {
        "total_ratings": stats["count"],
        "average_rating": stats["average"],
        "item_type": item_type,
        "item_id": item_id,
    }
