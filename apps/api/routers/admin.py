"""Admin router: user management and cascading catalog deletion."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from routers.auth_scope import require_admin
from routers.errors import http_error
from services.cascade import (
    delete_item_cascade,
    delete_user_cascade,
    get_item_delete_impact,
    get_user_delete_impact,
)
from services.errors import ServiceError
from services.users import get_user, list_users, set_admin_flag, user_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/users/all")
async def admin_list_users(
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return [user_to_dict(user) for user in await list_users(db)]
    except Exception:
        logger.exception("Failed to list users")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.get("/user/{user_id}")
async def admin_get_user(
    user_id: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return user_to_dict(await get_user(user_id, db))
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to fetch user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch user")


@router.get("/user/{user_id}/delete-impact")
async def admin_user_delete_impact(
    user_id: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await get_user_delete_impact(user_id=user_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to compute delete impact for user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to compute delete impact")


@router.delete("/user/{user_id}")
async def admin_delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    admin_id = admin.id
    try:
        result = await delete_user_cascade(user_id=user_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Admin %s failed to delete user %s", admin_id, user_id)
        raise HTTPException(status_code=500, detail="Failed to delete user")
    logger.info("Admin %s deleted user %s", admin_id, user_id)
    return {"message": "User deleted successfully", **result}


@router.patch("/user/{user_id}/promote")
async def admin_promote_user(
    user_id: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await set_admin_flag(user_id=user_id, is_admin=True, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to promote user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to promote user")
    return {"message": "User promoted to admin", "user": user_to_dict(user)}


@router.patch("/user/{user_id}/demote")
async def admin_demote_user(
    user_id: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await set_admin_flag(user_id=user_id, is_admin=False, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to demote user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to demote user")
    return {"message": "User demoted from admin", "user": user_to_dict(user)}


@router.get("/{item_type}/{item_id}/delete-impact")
async def admin_item_delete_impact(
    item_type: str,
    item_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await get_item_delete_impact(item_type=item_type, item_id=item_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to compute delete impact for %s/%s", item_type, item_id)
        raise HTTPException(status_code=500, detail="Failed to compute delete impact")


@router.delete("/{item_type}/{item_id}")
async def admin_delete_item(
    item_type: str,
    item_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await delete_item_cascade(item_type=item_type, item_id=item_id, db=db)
    except ServiceError as exc:
        raise http_error(exc)
    except Exception:
        logger.exception("Failed to delete %s/%s", item_type, item_id)
        raise HTTPException(status_code=500, detail="Failed to delete item")
    return {"message": "Item deleted successfully", **result}
