"""Cheese model."""

from sqlalchemy import Column, String, Text

from database import Base
from models.rateable_item import RateableItemMixin


class Cheese(RateableItemMixin, Base):
    """Cheese catalog entry. Natural key: name."""

    __tablename__ = "cheeses"

    name = Column(String(255), unique=True, nullable=False)
    type = Column(String(255), nullable=False)
    origin = Column(String(255), nullable=True)
    producer = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
