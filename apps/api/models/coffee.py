"""Coffee model."""

from typing import Literal

from sqlalchemy import JSON, Boolean, Column, String, Text, UniqueConstraint

from database import Base
from models.rateable_item import RateableItemMixin


CoffeeSpecies = Literal["Arabica", "Robusta", "Libérica", "Excelsa"]
CoffeeProcessingMethod = Literal[
    "Lavé",
    "Nature",
    "Honey",
    "Anaérobie",
    "Macération Carbonique",
    "Décortiqué Humide",
    "Nature Dépulpé",
]
CoffeeRoastLevel = Literal["Pâle", "Moyen", "Foncé"]
CoffeeIntensityLevel = Literal["Faible", "Moyen", "Élevé"]


class Coffee(RateableItemMixin, Base):
    """Coffee catalog entry. Natural key: name + roaster."""

    __tablename__ = "coffees"
    __table_args__ = (
        UniqueConstraint("name", "roaster", name="uq_coffees_name_roaster"),
    )

    name = Column(String(255), nullable=False)
    roaster = Column(String(255), nullable=False)

    # Origin
    country = Column(String(255), nullable=True)
    region = Column(String(255), nullable=True)
    farm = Column(String(255), nullable=True)
    altitude = Column(String(50), nullable=True)

    # Bean
    species = Column(String(50), nullable=True)
    variety = Column(String(100), nullable=True)
    processing_method = Column(String(100), nullable=True)
    decaffeinated = Column(Boolean, nullable=False, default=False)
    roast_level = Column(String(50), nullable=True)

    # Flavor profile
    tasting_notes = Column(JSON, nullable=True)
    acidity = Column(String(50), nullable=True)
    body = Column(String(50), nullable=True)
    sweetness = Column(String(50), nullable=True)

    organic = Column(Boolean, nullable=False, default=False)
    fair_trade = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
