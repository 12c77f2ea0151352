# price_comparator/models/alert.py

"""In-memory price-target alert model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Alert:
    """A user's request to be told when a price drops to ``target_price``.

    ``active`` only ever moves from ``True`` to ``False``, either because
    the alert triggered or because it was deactivated.
    """

    id: str
    product_id: str
    store_id: int
    target_price: Decimal
    active: bool
    created_at: datetime
