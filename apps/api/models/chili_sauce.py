"""ChiliSauce model."""

from typing import Literal

from sqlalchemy import Column, String, Text, UniqueConstraint

from database import Base
from models.rateable_item import RateableItemMixin


SpiceLevel = Literal["Mild", "Medium", "Hot", "Extra Hot", "Extreme"]


class ChiliSauce(RateableItemMixin, Base):
    """Chili sauce catalog entry. Natural key: name + brand."""

    __tablename__ = "chili_sauces"
    __table_args__ = (
        UniqueConstraint("name", "brand", name="uq_chili_sauces_name_brand"),
    )

    name = Column(String(255), nullable=False)
    brand = Column(String(255), nullable=False)
    spice_level = Column(String(50), nullable=False)
    chilis = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
