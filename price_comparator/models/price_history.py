# price_comparator/models/price_history.py

"""Filter and result models for price history timelines."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class PriceHistoryFilter:
    """Selects which observations feed a price history request.

    Only ``product_name`` is required; it is matched case-insensitively.
    The dates override the timeline bounds derived from the data.
    """

    product_name: str | None
    store_name: str | None = None
    category: str | None = None
    brand: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class PriceSegment:
    """A maximal date range with constant base price and discount."""

    start_date: date
    end_date: date
    original_price: Decimal
    final_price: Decimal
    discount_percentage: Decimal


@dataclass(frozen=True)
class StoreTimeline:
    """Gap-free sequence of segments for one store."""

    store_id: int
    store_name: str
    segments: list[PriceSegment] = field(
        default_factory=lambda: list[PriceSegment]()
    )


@dataclass(frozen=True)
class ProductTimeline:
    """Per-store price timelines for one product."""

    product_id: str
    product_name: str
    brand: str
    category: str
    stores: list[StoreTimeline] = field(
        default_factory=lambda: list[StoreTimeline]()
    )
