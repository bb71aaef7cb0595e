"""Wine model."""

from typing import Literal

from sqlalchemy import Boolean, Column, Float, String, Text, UniqueConstraint

from database import Base
from models.rateable_item import RateableItemMixin


WineColor = Literal["Rouge", "Blanc", "Rosé", "Mousseux", "Orange"]


class Wine(RateableItemMixin, Base):
    """Wine catalog entry. Natural key: name + color."""

    __tablename__ = "wines"
    __table_args__ = (
        UniqueConstraint("name", "color", name="uq_wines_name_color"),
    )

    name = Column(String(255), nullable=False)
    producer = Column(String(255), nullable=True)
    country = Column(String(255), nullable=False)
    region = Column(String(255), nullable=True)
    color = Column(String(50), nullable=False)
    grape = Column(String(255), nullable=True)
    alcohol = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    designation = Column(String(255), nullable=True)
    sugar = Column(Float, nullable=True)
    organic = Column(Boolean, nullable=False, default=False)
