"""Impact previews and failure-atomic deletion of users and catalog items.

Deleting a user or an item never relies on store-level cascades: child
viewer rows and ratings are enumerated and removed explicitly, in the same
transaction as the parent row. Any failing step rolls the whole unit back.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.rating import Rating, rating_viewers
from models.sharing_relationship import SharingRelationship
from models.user import User
from services.catalog import get_catalog_type, get_item
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

USER_DELETE_WARNINGS = [
    "This will delete all of the user's ratings",
    "Other users will lose shared ratings from this user",
]
ITEM_DELETE_WARNINGS = [
    "This will permanently delete all ratings for this item",
    "Users who rated this item will lose their ratings",
]


async def _get_user(user_id: str, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def _count_viewer_rows(rating_ids_query, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(rating_viewers).where(rating_viewers.c.rating_id.in_(rating_ids_query))
    )
    return int(result.scalar() or 0)


def _affected_users(rows) -> List[Dict[str, Any]]:
    return [
        {"id": user_id, "display_name": display_name, "ratings_count": int(count)}
        for user_id, display_name, count in rows
    ]


async def get_user_delete_impact(*, user_id: str, db: AsyncSession) -> Dict[str, Any]:
    """Read-only preview of what deleting the user would remove."""
    await _get_user(user_id, db)
    authored = select(Rating.id).where(Rating.user_id == user_id)

    ratings_result = await db.execute(select(func.count()).select_from(Rating).where(Rating.user_id == user_id))
    ratings_count = int(ratings_result.scalar() or 0)

    viewers_result = await db.execute(
        select(User.id, User.display_name, func.count(rating_viewers.c.rating_id))
        .join(rating_viewers, rating_viewers.c.user_id == User.id)
        .where(rating_viewers.c.rating_id.in_(authored))
        .group_by(User.id, User.display_name)
        .order_by(User.display_name.asc())
    )
    affected_users = _affected_users(viewers_result.all())

    viewer_links_result = await db.execute(
        select(func.count()).select_from(rating_viewers).where(rating_viewers.c.user_id == user_id)
    )

    return {
        "can_delete": True,
        "warnings": list(USER_DELETE_WARNINGS),
        "impact": {
            "ratings_count": ratings_count,
            "users_affected": len(affected_users),
            "sharings_count": await _count_viewer_rows(authored, db),
            "viewer_links_count": int(viewer_links_result.scalar() or 0),
            "affected_users": affected_users,
        },
    }


async def get_item_delete_impact(*, item_type: str, item_id: int, db: AsyncSession) -> Dict[str, Any]:
    """Read-only preview of what deleting the catalog item would remove."""
    tag = get_catalog_type(item_type).tag
    await get_item(tag, item_id, db)
    on_item = select(Rating.id).where(Rating.item_type == tag, Rating.item_id == item_id)

    authors_result = await db.execute(
        select(User.id, User.display_name, func.count(Rating.id))
        .join(Rating, Rating.user_id == User.id)
        .where(Rating.item_type == tag, Rating.item_id == item_id)
        .group_by(User.id, User.display_name)
        .order_by(User.display_name.asc())
    )
    affected_users = _affected_users(authors_result.all())

    return {
        "can_delete": True,
        "warnings": list(ITEM_DELETE_WARNINGS),
        "impact": {
            "ratings_count": sum(user["ratings_count"] for user in affected_users),
            "users_affected": len(affected_users),
            "sharings_count": await _count_viewer_rows(on_item, db),
            "affected_users": affected_users,
        },
    }


async def delete_user_cascade(*, user_id: str, db: AsyncSession) -> Dict[str, Any]:
    """Delete a user with their ratings, viewer links and sharing history as one unit."""
    user = await _get_user(user_id, db)
    display_name = user.display_name
    authored = select(Rating.id).where(Rating.user_id == user_id)

    try:
        await db.execute(delete(rating_viewers).where(rating_viewers.c.rating_id.in_(authored)))
        await db.execute(delete(rating_viewers).where(rating_viewers.c.user_id == user_id))
        await db.execute(
            delete(Rating).where(Rating.user_id == user_id).execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(SharingRelationship)
            .where(or_(SharingRelationship.owner_id == user_id, SharingRelationship.viewer_id == user_id))
            .execution_options(synchronize_session=False)
        )
        await db.execute(delete(User).where(User.id == user_id).execution_options(synchronize_session=False))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("User cascade delete failed for user %s; rolled back", user_id)
        raise

    db.expunge_all()
    logger.info("Deleted user %s with all ratings and sharing links", user_id)
    return {"deleted_user": display_name}


async def delete_item_cascade(*, item_type: str, item_id: int, db: AsyncSession) -> Dict[str, Any]:
    """Delete a catalog item together with its ratings and their viewer links."""
    catalog_type = get_catalog_type(item_type)
    model = catalog_type.model
    await get_item(catalog_type.tag, item_id, db)
    on_item = select(Rating.id).where(Rating.item_type == catalog_type.tag, Rating.item_id == item_id)

    try:
        await db.execute(delete(rating_viewers).where(rating_viewers.c.rating_id.in_(on_item)))
        deleted = await db.execute(
            delete(Rating)
            .where(Rating.item_type == catalog_type.tag, Rating.item_id == item_id)
            .execution_options(synchronize_session=False)
        )
        await db.execute(delete(model).where(model.id == item_id).execution_options(synchronize_session=False))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Cascade delete failed for %s/%s; rolled back", catalog_type.tag, item_id)
        raise

    db.expunge_all()
    logger.info("Deleted %s/%s and %s ratings", catalog_type.tag, item_id, deleted.rowcount)
    return {"ratings_deleted": int(deleted.rowcount or 0)}
