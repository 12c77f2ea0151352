# price_comparator/models/price_observation.py

"""Dated price observation model for price resolution and history."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class PriceObservation:
    """A single price observed for a product at a store on a given date."""

    product_id: str
    store_id: int
    price: Decimal
    currency: str
    entry_date: date
