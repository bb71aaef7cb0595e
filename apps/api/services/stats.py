"""Anonymous community statistics for catalog items."""

from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.rating import Rating
from services.catalog import get_catalog_type


async def get_community_stats(*, item_type: str, item_id: int, db: AsyncSession) -> Dict[str, Any]:
    """Count and mean grade over every rating of the item.

    This is the one read path that ignores the viewer relation, which is why it
    only ever returns aggregates: no rating ids, notes or authors.
    """
    tag = get_catalog_type(item_type).tag
    result = await db.execute(
        select(
            func.count(Rating.id),
            func.coalesce(func.avg(Rating.grade), 0),
        ).where(Rating.item_type == tag, Rating.item_id == item_id)
    )
    count, average = result.one()
    return {
        "count": int(count or 0),
        "average": float(average or 0),
    }
