"""Catalog registry: the five rateable item collections behind one tagged lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from models.cheese import Cheese
from models.chili_sauce import ChiliSauce
from models.coffee import Coffee
from models.gin import Gin
from models.wine import Wine
from services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogType:
    tag: str
    label: str
    model: Type[Any]
    natural_key: Tuple[str, ...]


CATALOG_TYPES: Dict[str, CatalogType] = {
    "cheese": CatalogType("cheese", "Cheese", Cheese, ("name",)),
    "gin": CatalogType("gin", "Gin", Gin, ("name", "producer")),
    "wine": CatalogType("wine", "Wine", Wine, ("name", "color")),
    "coffee": CatalogType("coffee", "Coffee", Coffee, ("name", "roaster")),
    "chili-sauce": CatalogType("chili-sauce", "Chili sauce", ChiliSauce, ("name", "brand")),
}


def get_catalog_type(item_type: Optional[str]) -> CatalogType:
    """Resolve a type tag or raise ValidationError for anything unknown."""
    catalog_type = CATALOG_TYPES.get(str(item_type or "").strip())
    if catalog_type is None:
        known = ", ".join(sorted(CATALOG_TYPES))
        raise ValidationError(f"Unknown item type '{item_type}'. Expected one of: {known}")
    return catalog_type


def item_to_dict(item: Any) -> Dict[str, Any]:
    return {column.name: getattr(item, column.name) for column in item.__table__.columns}


async def item_exists(item_type: str, item_id: int, db: AsyncSession) -> bool:
    catalog_type = get_catalog_type(item_type)
    model = catalog_type.model
    result = await db.execute(select(func.count()).select_from(model).where(model.id == item_id))
    return int(result.scalar() or 0) > 0


async def get_item(item_type: str, item_id: int, db: AsyncSession) -> Any:
    catalog_type = get_catalog_type(item_type)
    item = await db.get(catalog_type.model, item_id)
    if item is None:
        raise NotFoundError(f"{catalog_type.label} not found")
    return item


async def list_items(item_type: str, db: AsyncSession) -> List[Any]:
    catalog_type = get_catalog_type(item_type)
    model = catalog_type.model
    result = await db.execute(select(model).order_by(model.name.asc(), model.id.asc()))
    return list(result.scalars().all())


async def _find_natural_key_duplicate(
    catalog_type: CatalogType,
    values: Dict[str, Any],
    db: AsyncSession,
    *,
    exclude_id: Optional[int] = None,
) -> Optional[Any]:
    model = catalog_type.model
    clauses = [getattr(model, field) == values.get(field) for field in catalog_type.natural_key]
    if exclude_id is not None:
        clauses.append(model.id != exclude_id)
    result = await db.execute(select(model).where(and_(*clauses)).limit(1))
    return result.scalar_one_or_none()


def _natural_key_label(catalog_type: CatalogType, values: Dict[str, Any]) -> str:
    return " / ".join(str(values.get(field) or "") for field in catalog_type.natural_key)


async def create_item(item_type: str, fields: Dict[str, Any], db: AsyncSession) -> Any:
    """Insert a catalog item, rejecting natural-key duplicates with ConflictError."""
    catalog_type = get_catalog_type(item_type)
    if await _find_natural_key_duplicate(catalog_type, fields, db):
        raise ConflictError(
            f"{catalog_type.label} already exists: {_natural_key_label(catalog_type, fields)}"
        )

    item = catalog_type.model(**fields)
    db.add(item)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(
            f"{catalog_type.label} already exists: {_natural_key_label(catalog_type, fields)}"
        ) from exc
    await db.refresh(item)
    logger.info("Created %s id=%s", catalog_type.tag, item.id)
    return item


async def update_item(item_type: str, item_id: int, fields: Dict[str, Any], db: AsyncSession) -> Any:
    """Apply an allow-listed partial update to a catalog item."""
    catalog_type = get_catalog_type(item_type)
    item = await get_item(item_type, item_id, db)
    if not fields:
        return item

    merged = item_to_dict(item)
    merged.update(fields)
    if await _find_natural_key_duplicate(catalog_type, merged, db, exclude_id=item.id):
        raise ConflictError(
            f"{catalog_type.label} already exists: {_natural_key_label(catalog_type, merged)}"
        )

    for field, value in fields.items():
        setattr(item, field, value)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(
            f"{catalog_type.label} already exists: {_natural_key_label(catalog_type, merged)}"
        ) from exc
    await db.refresh(item)
    return item
