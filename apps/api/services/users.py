"""User directory: identity upsert, profile completion, and admin flags."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from config import settings
from models.user import User
from services.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from services.google_identity import GoogleIdentity
from services.safe_logging import log_auth_success, log_error

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("display_name", "discoverable")
DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 50


def user_to_dict(user: User) -> Dict[str, Any]:
    """Full profile, including email. Only for the user themself or admins."""
    return {
        "id": user.id,
        "google_id": user.google_id,
        "email": user.email,
        "full_name": user.full_name,
        "avatar": user.avatar,
        "display_name": user.display_name,
        "discoverable": bool(user.discoverable),
        "profile_completed": bool(user.profile_completed),
        "is_admin": is_user_admin(user),
        "last_login_at": user.last_login_at.isoformat() if user.last_login_at else None,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def is_user_admin(user: Optional[User]) -> bool:
    """Admin via the database flag or the bootstrap INITIAL_ADMIN_EMAIL."""
    if user is None:
        return False
    initial_admin_email = (settings.INITIAL_ADMIN_EMAIL or "").strip()
    return bool(user.is_admin) or (bool(initial_admin_email) and user.email == initial_admin_email)


async def get_user(user_id: str, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.asc()))
    return list(result.scalars().all())


async def upsert_google_user(identity: GoogleIdentity, db: AsyncSession) -> User:
    """Find the user by Google subject or create one; stamp the login time."""
    now = datetime.now(timezone.utc)
    result = await db.execute(select(User).where(User.google_id == identity.subject_id))
    user = result.scalar_one_or_none()

    if user is None:
        user = User(
            google_id=identity.subject_id,
            email=identity.email,
            full_name=identity.full_name,
            avatar=identity.avatar_url,
            display_name=None,
            discoverable=True,
            profile_completed=False,
            last_login_at=now,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            log_error("User creation", exc)
            raise ConflictError("An account already exists for this email") from exc
    else:
        user.last_login_at = now
        if identity.avatar_url and not user.avatar:
            user.avatar = identity.avatar_url
        await db.commit()

    await db.refresh(user)
    log_auth_success(user.email)
    return user


async def is_display_name_available(
    display_name: str,
    db: AsyncSession,
    *,
    exclude_user_id: Optional[str] = None,
) -> bool:
    name = str(display_name or "").strip()
    if not name:
        raise ValidationError("Display name required")
    statement = select(func.count()).select_from(User).where(User.display_name == name)
    if exclude_user_id:
        statement = statement.where(User.id != exclude_user_id)
    result = await db.execute(statement)
    return int(result.scalar() or 0) == 0


def _clean_display_name(display_name: Any) -> str:
    name = str(display_name or "").strip()
    if not DISPLAY_NAME_MIN_LENGTH <= len(name) <= DISPLAY_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Display name must be {DISPLAY_NAME_MIN_LENGTH}-{DISPLAY_NAME_MAX_LENGTH} characters"
        )
    return name


async def _commit_profile(user: User, db: AsyncSession) -> User:
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Display name already taken") from exc
    await db.refresh(user)
    return user


async def complete_profile(
    *,
    user: User,
    display_name: str,
    discoverable: bool,
    db: AsyncSession,
) -> User:
    name = _clean_display_name(display_name)
    if not await is_display_name_available(name, db, exclude_user_id=user.id):
        raise ConflictError("Display name already taken")

    user.display_name = name
    user.discoverable = bool(discoverable)
    user.profile_completed = True
    return await _commit_profile(user, db)


async def update_profile(*, user: User, changes: Dict[str, Any], db: AsyncSession) -> User:
    """Apply the allow-listed profile fields; anything else is ignored."""
    updates = {key: value for key, value in changes.items() if key in PROFILE_FIELDS and value is not None}
    if not updates:
        raise ValidationError("No valid fields to update")

    if "display_name" in updates:
        name = _clean_display_name(updates["display_name"])
        if not await is_display_name_available(name, db, exclude_user_id=user.id):
            raise ConflictError("Display name already taken")
        user.display_name = name
    if "discoverable" in updates:
        user.discoverable = bool(updates["discoverable"])
    return await _commit_profile(user, db)


async def set_admin_flag(*, user_id: str, is_admin: bool, db: AsyncSession) -> User:
    user = await get_user(user_id, db)
    if is_admin:
        if user.is_admin:
            raise ConflictError("User is already an admin")
    else:
        if not user.is_admin:
            raise ConflictError("User is not an admin")
        initial_admin_email = (settings.INITIAL_ADMIN_EMAIL or "").strip()
        if initial_admin_email and user.email == initial_admin_email:
            raise ForbiddenError("Cannot demote initial admin configured in INITIAL_ADMIN_EMAIL")

    user.is_admin = is_admin
    await db.commit()
    await db.refresh(user)
    logger.info("User %s admin flag set to %s", user_id, is_admin)
    return user
