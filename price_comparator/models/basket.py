# price_comparator/models/basket.py

"""Result models for basket optimisation."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class BasketItem:
    """One product line in a store basket."""

    product_id: str
    product_name: str
    original_price: Decimal
    discounted_price: Decimal
    discount_percentage: Decimal


@dataclass(frozen=True)
class StoreBasket:
    """The products to buy at one store, with their discounted total."""

    store_id: int
    store_name: str
    items: list[BasketItem] = field(
        default_factory=lambda: list[BasketItem]()
    )
    total: Decimal = Decimal("0")
