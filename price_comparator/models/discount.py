# price_comparator/models/discount.py

"""Time-bounded percentage discount model."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class Discount:
    """A percentage discount valid from ``from_date`` to ``to_date`` inclusive.

    ``entry_date`` is the day the discount was published, which can be
    earlier than the day it takes effect.
    """

    product_id: str
    store_id: int
    percentage: Decimal
    from_date: date
    to_date: date
    entry_date: date
