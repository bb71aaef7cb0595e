"""Gin model."""

from sqlalchemy import Column, String, Text, UniqueConstraint

from database import Base
from models.rateable_item import RateableItemMixin


class Gin(RateableItemMixin, Base):
    """Gin catalog entry. Natural key: name + producer."""

    __tablename__ = "gins"
    __table_args__ = (
        UniqueConstraint("name", "producer", name="uq_gins_name_producer"),
    )

    name = Column(String(255), nullable=False)
    producer = Column(String(255), nullable=False)
    origin = Column(String(255), nullable=True)
    profile = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
