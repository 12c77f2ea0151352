# price_comparator/models/recommendation.py

"""Cheaper-alternative recommendation model."""

from dataclasses import dataclass
from decimal import Decimal

from price_comparator.models.product import Unit


@dataclass(frozen=True)
class Recommendation:
    """A same-category product that is cheaper per unit than the original."""

    product_id: str
    product_name: str
    brand: str
    store_id: int
    store_name: str
    price: Decimal
    unit: Unit
    package_quantity: Decimal
    price_per_unit: Decimal
    savings_percentage: Decimal
