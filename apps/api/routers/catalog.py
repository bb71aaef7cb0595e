"""Catalog routers, one per item type, built from a shared factory."""

import logging
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.chili_sauce import SpiceLevel
from models.coffee import CoffeeIntensityLevel, CoffeeProcessingMethod, CoffeeRoastLevel, CoffeeSpecies
from models.user import User
from models.wine import WineColor
from routers.auth_scope import require_complete_profile
from routers.errors import http_error
from services.catalog import create_item, get_catalog_type, get_item, item_to_dict, list_items, update_item
from services.errors import ServiceError

logger = logging.getLogger(__name__)


class CreateCheeseRequest(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    origin: Optional[str] = None
    producer: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class UpdateCheeseRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    origin: Optional[str] = None
    producer: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class CreateGinRequest(BaseModel):
    name: str = Field(min_length=1)
    producer: str = Field(min_length=1)
    origin: Optional[str] = None
    profile: str = Field(min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None


class UpdateGinRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    producer: Optional[str] = Field(default=None, min_length=1)
    origin: Optional[str] = None
    profile: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None


class CreateWineRequest(BaseModel):
    name: str = Field(min_length=1)
    producer: Optional[str] = None
    country: str = Field(min_length=1)
    region: Optional[str] = None
    color: WineColor
    grape: Optional[str] = None
    alcohol: Optional[float] = Field(default=None, ge=0, le=100)
    description: Optional[str] = None
    designation: Optional[str] = None
    sugar: Optional[float] = Field(default=None, ge=0)
    organic: bool = False
    image_url: Optional[str] = None


class UpdateWineRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    producer: Optional[str] = None
    country: Optional[str] = Field(default=None, min_length=1)
    region: Optional[str] = None
    color: Optional[WineColor] = None
    grape: Optional[str] = None
    alcohol: Optional[float] = Field(default=None, ge=0, le=100)
    description: Optional[str] = None
    designation: Optional[str] = None
    sugar: Optional[float] = Field(default=None, ge=0)
    organic: Optional[bool] = None
    image_url: Optional[str] = None


class CreateCoffeeRequest(BaseModel):
    name: str = Field(min_length=1)
    roaster: str = Field(min_length=1)
    country: Optional[str] = None
    region: Optional[str] = None
    farm: Optional[str] = None
    altitude: Optional[str] = None
    species: Optional[CoffeeSpecies] = None
    variety: Optional[str] = None
    processing_method: Optional[CoffeeProcessingMethod] = None
    decaffeinated: bool = False
    roast_level: Optional[CoffeeRoastLevel] = None
    tasting_notes: List[str] = Field(default_factory=list)
    acidity: Optional[CoffeeIntensityLevel] = None
    body: Optional[CoffeeIntensityLevel] = None
    sweetness: Optional[CoffeeIntensityLevel] = None
    organic: bool = False
    fair_trade: bool = False
    description: Optional[str] = None
    image_url: Optional[str] = None


class UpdateCoffeeRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    roaster: Optional[str] = Field(default=None, min_length=1)
    country: Optional[str] = None
    region: Optional[str] = None
    farm: Optional[str] = None
    altitude: Optional[str] = None
    species: Optional[CoffeeSpecies] = None
    variety: Optional[str] = None
    processing_method: Optional[CoffeeProcessingMethod] = None
    decaffeinated: Optional[bool] = None
    roast_level: Optional[CoffeeRoastLevel] = None
    tasting_notes: Optional[List[str]] = None
    acidity: Optional[CoffeeIntensityLevel] = None
    body: Optional[CoffeeIntensityLevel] = None
    sweetness: Optional[CoffeeIntensityLevel] = None
    organic: Optional[bool] = None
    fair_trade: Optional[bool] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class CreateChiliSauceRequest(BaseModel):
    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    spice_level: SpiceLevel
    chilis: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class UpdateChiliSauceRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = Field(default=None, min_length=1)
    spice_level: Optional[SpiceLevel] = None
    chilis: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


def build_catalog_router(
    item_type: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
) -> APIRouter:
    """CRUD routes for one catalog type; deletion lives in the admin router."""
    label = get_catalog_type(item_type).label.lower()
    router = APIRouter()

    @router.post("/new", status_code=201)
    async def create_catalog_item(
        request: create_schema,  # type: ignore[valid-type]
        user: User = Depends(require_complete_profile),
        db: AsyncSession = Depends(get_db),
    ):
        try:
            item = await create_item(item_type, request.model_dump(), db)
            return item_to_dict(item)
        except ServiceError as exc:
            raise http_error(exc)
        except Exception:
            logger.exception("Failed to create %s for user %s", item_type, user.id)
            raise HTTPException(status_code=500, detail=f"Failed to create {label}")

    @router.get("/all")
    async def list_catalog_items(
        _user: User = Depends(require_complete_profile),
        db: AsyncSession = Depends(get_db),
    ):
        try:
            return [item_to_dict(item) for item in await list_items(item_type, db)]
        except ServiceError as exc:
            raise http_error(exc)
        except Exception:
            logger.exception("Failed to list %s items", item_type)
            raise HTTPException(status_code=500, detail=f"Failed to fetch {label} list")

    @router.get("/{item_id}")
    async def get_catalog_item(
        item_id: int,
        _user: User = Depends(require_complete_profile),
        db: AsyncSession = Depends(get_db),
    ):
        try:
            return item_to_dict(await get_item(item_type, item_id, db))
        except ServiceError as exc:
            raise http_error(exc)
        except Exception:
            logger.exception("Failed to get %s %s", item_type, item_id)
            raise HTTPException(status_code=500, detail=f"Failed to fetch {label}")

    @router.put("/{item_id}")
    async def update_catalog_item(
        item_id: int,
        request: update_schema,  # type: ignore[valid-type]
        _user: User = Depends(require_complete_profile),
        db: AsyncSession = Depends(get_db),
    ):
        try:
            item = await update_item(item_type, item_id, request.model_dump(exclude_none=True), db)
            return item_to_dict(item)
        except ServiceError as exc:
            raise http_error(exc)
        except Exception:
            logger.exception("Failed to update %s %s", item_type, item_id)
            raise HTTPException(status_code=500, detail=f"Failed to update {label}")

    return router


CATALOG_ROUTERS = {
    "cheese": build_catalog_router("cheese", CreateCheeseRequest, UpdateCheeseRequest),
    "gin": build_catalog_router("gin", CreateGinRequest, UpdateGinRequest),
    "wine": build_catalog_router("wine", CreateWineRequest, UpdateWineRequest),
    "coffee": build_catalog_router("coffee", CreateCoffeeRequest, UpdateCoffeeRequest),
    "chili-sauce": build_catalog_router("chili-sauce", CreateChiliSauceRequest, UpdateChiliSauceRequest),
}
