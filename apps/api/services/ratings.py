"""Rating lifecycle and privacy-filtered reads.

Every rating has exactly one author. A rating is visible to a user when that
user is the author or is listed in ``rating_viewers``; the listing helpers in
this module never return anything else. Ownership is checked on every
mutating call against the requester of the current request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from models.rating import Rating, rating_viewers
from models.user import User
from services.catalog import get_catalog_type, item_exists
from services.errors import ForbiddenError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("grade", "note", "item_type", "item_id")


def author_summary(user: Optional[User]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "display_name": user.display_name,
        "avatar": user.avatar,
        "discoverable": bool(user.discoverable),
    }


def viewer_summary(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "display_name": user.display_name,
        "avatar": user.avatar,
    }


def rating_to_dict(rating: Rating) -> Dict[str, Any]:
    return {
        "id": rating.id,
        "grade": rating.grade,
        "note": rating.note or "",
        "user_id": rating.user_id,
        "item_type": rating.item_type,
        "item_id": rating.item_id,
        "created_at": rating.created_at.isoformat() if rating.created_at else None,
        "updated_at": rating.updated_at.isoformat() if rating.updated_at else None,
        "user": author_summary(rating.author),
        "viewers": [viewer_summary(viewer) for viewer in rating.viewers],
    }


def visible_to(user_id: str):
    """SQL predicate mirroring ``Rating.is_visible_to``."""
    shared_with_user = select(rating_viewers.c.rating_id).where(rating_viewers.c.user_id == user_id)
    return or_(Rating.user_id == user_id, Rating.id.in_(shared_with_user))


def _with_people(statement):
    return statement.options(
        selectinload(Rating.author),
        selectinload(Rating.viewers),
    ).execution_options(populate_existing=True)


async def load_rating(rating_id: int, db: AsyncSession) -> Rating:
    """Fetch a rating with its author and viewers, or raise NotFoundError."""
    result = await db.execute(_with_people(select(Rating).where(Rating.id == rating_id)))
    rating = result.scalar_one_or_none()
    if rating is None:
        raise NotFoundError("Rating not found")
    return rating


async def get_owned_rating(rating_id: int, requester_id: str, db: AsyncSession, *, action: str) -> Rating:
    result = await db.execute(select(Rating).where(Rating.id == rating_id))
    rating = result.scalar_one_or_none()
    if rating is None:
        raise NotFoundError("Rating not found")
    if rating.user_id != requester_id:
        raise ForbiddenError(f"You can only {action} your own ratings")
    return rating


async def _validate_item_reference(item_type: Optional[str], item_id: Optional[int], db: AsyncSession) -> str:
    catalog_type = get_catalog_type(item_type)
    if item_id is None:
        raise ValidationError("item_id is required")
    if not await item_exists(catalog_type.tag, item_id, db):
        raise NotFoundError(f"{catalog_type.label} not found")
    return catalog_type.tag


def _coerce_grade(grade: Any) -> float:
    if grade is None:
        raise ValidationError("grade is required")
    try:
        return float(grade)
    except (TypeError, ValueError) as exc:
        raise ValidationError("grade must be a number") from exc


async def create_rating(
    *,
    author_id: str,
    item_type: Optional[str],
    item_id: Optional[int],
    grade: Any,
    note: Optional[str] = None,
    db: AsyncSession,
) -> Dict[str, Any]:
    value = _coerce_grade(grade)
    tag = await _validate_item_reference(item_type, item_id, db)

    rating = Rating(
        grade=value,
        note=note or "",
        user_id=author_id,
        item_type=tag,
        item_id=item_id,
    )
    db.add(rating)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Rating %s created on %s/%s", rating.id, tag, item_id)
    return rating_to_dict(await load_rating(rating.id, db))


async def edit_rating(
    *,
    rating_id: int,
    requester_id: str,
    changes: Dict[str, Any],
    db: AsyncSession,
) -> Dict[str, Any]:
    """Overwrite the supplied fields; author and viewers never change here."""
    rating = await get_owned_rating(rating_id, requester_id, db, action="edit")
    updates = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}

    if "grade" in updates:
        rating.grade = _coerce_grade(updates["grade"])
    if "note" in updates:
        rating.note = updates["note"] or ""
    if "item_type" in updates or "item_id" in updates:
        item_type = updates.get("item_type", rating.item_type)
        item_id = updates.get("item_id", rating.item_id)
        rating.item_type = await _validate_item_reference(item_type, item_id, db)
        rating.item_id = item_id

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return rating_to_dict(await load_rating(rating_id, db))


async def remove_rating(*, rating_id: int, requester_id: str, db: AsyncSession) -> None:
    await get_owned_rating(rating_id, requester_id, db, action="delete")
    try:
        await db.execute(delete(rating_viewers).where(rating_viewers.c.rating_id == rating_id))
        await db.execute(delete(Rating).where(Rating.id == rating_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info("Rating %s removed by its author", rating_id)


def _filter_item_type(statement, item_type: Optional[str]):
    if not item_type:
        return statement
    tag = get_catalog_type(item_type).tag
    return statement.where(Rating.item_type == tag)


def _ensure_self(user_id: str, requester_id: str) -> None:
    if user_id != requester_id:
        raise ForbiddenError("Access denied")


async def _fetch(statement, db: AsyncSession) -> List[Dict[str, Any]]:
    result = await db.execute(_with_people(statement.order_by(Rating.created_at.desc(), Rating.id.desc())))
    return [rating_to_dict(rating) for rating in result.scalars().all()]


async def list_ratings_by_author(
    *,
    author_id: str,
    requester_id: str,
    item_type: Optional[str] = None,
    db: AsyncSession,
) -> List[Dict[str, Any]]:
    _ensure_self(author_id, requester_id)
    statement = _filter_item_type(select(Rating).where(Rating.user_id == author_id), item_type)
    return await _fetch(statement, db)


async def list_ratings_by_viewer(
    *,
    user_id: str,
    requester_id: str,
    item_type: Optional[str] = None,
    db: AsyncSession,
) -> List[Dict[str, Any]]:
    """Everything the user can see: their own ratings plus ratings shared with them."""
    _ensure_self(user_id, requester_id)
    statement = _filter_item_type(select(Rating).where(visible_to(user_id)), item_type)
    return await _fetch(statement, db)


async def list_ratings_for_item(
    *,
    item_type: str,
    item_id: int,
    requester_id: str,
    db: AsyncSession,
) -> List[Dict[str, Any]]:
    tag = get_catalog_type(item_type).tag
    statement = select(Rating).where(
        Rating.item_type == tag,
        Rating.item_id == item_id,
        visible_to(requester_id),
    )
    return await _fetch(statement, db)
