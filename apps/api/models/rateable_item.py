"""Columns shared by every rateable catalog item."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func


class RateableItemMixin:
    """Integer identity plus optional image reference.

    Ratings point at items through the (item_type, id) pair, so there is no
    foreign key from ``ratings`` to the item tables.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    image_url = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
