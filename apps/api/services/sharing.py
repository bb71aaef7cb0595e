"""Viewer management for ratings: share, hide, and bulk privacy actions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import and_, delete, func, insert, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.rating import Rating, rating_viewers
from models.sharing_relationship import SharingRelationship
from models.user import User
from services.errors import NotFoundError, ValidationError
from services.ratings import author_summary, get_owned_rating, load_rating, rating_to_dict

logger = logging.getLogger(__name__)


def _clean_ids(user_ids: Optional[Iterable[Any]]) -> List[str]:
    cleaned: List[str] = []
    for value in user_ids or []:
        token = str(value or "").strip()
        if token and token not in cleaned:
            cleaned.append(token)
    return cleaned


async def _record_sharing_relationships(owner_id: str, viewer_ids: List[str], db: AsyncSession) -> None:
    if not viewer_ids:
        return
    result = await db.execute(
        select(SharingRelationship.viewer_id).where(
            SharingRelationship.owner_id == owner_id,
            SharingRelationship.viewer_id.in_(viewer_ids),
        )
    )
    known = set(result.scalars().all())
    if known:
        await db.execute(
            update(SharingRelationship)
            .where(
                SharingRelationship.owner_id == owner_id,
                SharingRelationship.viewer_id.in_(sorted(known)),
            )
            .values(last_shared_at=func.now())
            .execution_options(synchronize_session=False)
        )
    for viewer_id in viewer_ids:
        if viewer_id not in known:
            db.add(SharingRelationship(owner_id=owner_id, viewer_id=viewer_id))


async def share_rating(
    *,
    rating_id: int,
    requester_id: str,
    user_ids: Optional[Iterable[Any]],
    db: AsyncSession,
) -> Dict[str, Any]:
    """Add viewers to a rating. Unknown ids and the author are skipped; repeats are no-ops."""
    rating = await get_owned_rating(rating_id, requester_id, db, action="share")
    candidates = [user_id for user_id in _clean_ids(user_ids) if user_id != rating.user_id]

    try:
        if candidates:
            found = await db.execute(select(User.id).where(User.id.in_(candidates)))
            existing_users = set(found.scalars().all())
            targets = [user_id for user_id in candidates if user_id in existing_users]

            existing = await db.execute(
                select(rating_viewers.c.user_id).where(
                    rating_viewers.c.rating_id == rating_id,
                    rating_viewers.c.user_id.in_(targets),
                )
            )
            present = set(existing.scalars().all())
            new_rows = [
                {"rating_id": rating_id, "user_id": user_id}
                for user_id in targets
                if user_id not in present
            ]
            if new_rows:
                await db.execute(insert(rating_viewers), new_rows)
            await _record_sharing_relationships(rating.user_id, targets, db)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return rating_to_dict(await load_rating(rating_id, db))


async def hide_rating(
    *,
    rating_id: int,
    requester_id: str,
    user_ids: Optional[Iterable[Any]] = None,
    user_id: Optional[str] = None,
    db: AsyncSession,
) -> Dict[str, Any]:
    """Remove viewers from a rating. The batch list wins over the legacy single id."""
    await get_owned_rating(rating_id, requester_id, db, action="unshare")

    targets = _clean_ids(user_ids)
    if not targets:
        targets = _clean_ids([user_id])
    if not targets:
        raise ValidationError("Must specify user_id or user_ids")

    try:
        await db.execute(
            delete(rating_viewers).where(
                rating_viewers.c.rating_id == rating_id,
                rating_viewers.c.user_id.in_(targets),
            )
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return rating_to_dict(await load_rating(rating_id, db))


async def bulk_make_private(*, user_id: str, db: AsyncSession) -> Dict[str, Any]:
    """Clear the viewer set of every rating the user authored.

    Ratings that were already private still count as affected. All rows are
    cleared in one transaction; clearing is idempotent so a retry is safe.
    """
    result = await db.execute(select(Rating.id).where(Rating.user_id == user_id).order_by(Rating.id))
    rating_ids = list(result.scalars().all())

    ratings_affected = 0
    try:
        for rating_id in rating_ids:
            await db.execute(delete(rating_viewers).where(rating_viewers.c.rating_id == rating_id))
            ratings_affected += 1
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Made %s ratings private for user %s", ratings_affected, user_id)
    return {
        "message": "All ratings made private successfully",
        "ratings_affected": ratings_affected,
    }


async def bulk_remove_viewer(*, owner_id: str, target_user_id: str, db: AsyncSession) -> Dict[str, Any]:
    """Remove one viewer from every rating of the owner that lists them."""
    target = await db.get(User, target_user_id)
    if target is None:
        raise NotFoundError("Target user not found")

    result = await db.execute(
        select(Rating.id)
        .join(rating_viewers, rating_viewers.c.rating_id == Rating.id)
        .where(and_(Rating.user_id == owner_id, rating_viewers.c.user_id == target_user_id))
        .order_by(Rating.id)
    )
    rating_ids = list(result.scalars().all())

    ratings_affected = 0
    try:
        for rating_id in rating_ids:
            await db.execute(
                delete(rating_viewers).where(
                    rating_viewers.c.rating_id == rating_id,
                    rating_viewers.c.user_id == target_user_id,
                )
            )
            ratings_affected += 1
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return {
        "message": "User removed from all shares successfully",
        "ratings_affected": ratings_affected,
        "removed_user": target.display_name,
    }


async def list_shareable_users(*, user_id: str, db: AsyncSession) -> Dict[str, List[Dict[str, Any]]]:
    """Previous connections (authors currently sharing with me) plus other discoverable users."""
    previous_result = await db.execute(
        select(User)
        .join(Rating, Rating.user_id == User.id)
        .join(rating_viewers, rating_viewers.c.rating_id == Rating.id)
        .where(
            rating_viewers.c.user_id == user_id,
            User.id != user_id,
            User.profile_completed.is_(True),
        )
        .distinct()
        .order_by(User.display_name.asc())
    )
    previous_connections = list(previous_result.scalars().all())

    exclude_ids = [user_id] + [user.id for user in previous_connections]
    discoverable_result = await db.execute(
        select(User)
        .where(
            User.discoverable.is_(True),
            User.profile_completed.is_(True),
            User.id.not_in(exclude_ids),
        )
        .order_by(User.display_name.asc())
    )

    return {
        "previous_connections": [author_summary(user) for user in previous_connections],
        "discoverable": [author_summary(user) for user in discoverable_result.scalars().all()],
    }
