# price_comparator/services/price_history_builder.py

"""Reconstructs per-store price and discount timelines for a product."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta
from decimal import Decimal

from price_comparator.errors import InvalidArgument
from price_comparator.models.discount import Discount
from price_comparator.models.price_history import (
    PriceHistoryFilter,
    PriceSegment,
    ProductTimeline,
    StoreTimeline,
)
from price_comparator.models.price_observation import PriceObservation
from price_comparator.models.product import Product
from price_comparator.pricing.discount_index import DiscountIndex
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.history")

_ONE_DAY = timedelta(days=1)


class PriceHistoryBuilder:
    """Builds gap-free segment timelines from price and discount records.

    Each price observation is in force from its entry date up to the day
    before the next observation for the same store.  Discounts are cut
    into those windows so every segment has one base price and one
    discount state.  No segment spans two observations.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def build(
        self, history_filter: PriceHistoryFilter,
    ) -> list[ProductTimeline] | None:
        """Return one timeline per matching product, or ``None``.

        ``None`` means no price observation matched the filter.
        """
        name = (history_filter.product_name or "").strip()
        if not name:
            msg = "Product name is required"
            raise InvalidArgument(msg)
        start, end = history_filter.start_date, history_filter.end_date
        if start is not None and end is not None and start > end:
            msg = f"Start date {start} is after end date {end}"
            raise InvalidArgument(msg)

        store_filter = None
        if history_filter.store_name is not None:
            store_filter = self._records.find_store_by_name(
                history_filter.store_name
            )
            if store_filter is None:
                logger.info(
                    "No store named '%s'", history_filter.store_name,
                )
                return None

        timelines: list[ProductTimeline] = []
        for product in self._matching_products(history_filter, name):
            prices = self._records.prices(
                product_id=product.id,
                store_id=store_filter.id if store_filter else None,
            )
            if not prices:
                continue
            timeline = self._build_product(product, prices, start, end)
            if timeline.stores:
                timelines.append(timeline)

        if not timelines:
            logger.info("No price history matches filter %s", history_filter)
            return None
        return timelines

    def _matching_products(
        self, history_filter: PriceHistoryFilter, name: str,
    ) -> list[Product]:
        """Products passing the name, category and brand filters."""
        wanted = name.lower()
        return [
            p for p in self._records.products()
            if p.name.lower() == wanted
            and (
                history_filter.category is None
                or p.category == history_filter.category
            )
            and (
                history_filter.brand is None
                or p.brand == history_filter.brand
            )
        ]

    def _build_product(
        self,
        product: Product,
        prices: list[PriceObservation],
        start: date | None,
        end: date | None,
    ) -> ProductTimeline:
        """Build the store timelines for one product."""
        by_store: dict[int, list[PriceObservation]] = {}
        for obs in prices:
            by_store.setdefault(obs.store_id, []).append(obs)

        stores: list[StoreTimeline] = []
        for store_id in sorted(by_store):
            store = self._records.get_store(store_id)
            segments = build_segments(
                by_store[store_id],
                self._records.discounts(
                    product_id=product.id, store_id=store_id,
                ),
                start,
                end,
            )
            if not segments:
                # No observation in force anywhere inside the range
                continue
            stores.append(StoreTimeline(
                store_id=store_id,
                store_name=store.name if store else str(store_id),
                segments=segments,
            ))
            logger.debug(
                "Product %s at store %s: %d segments",
                product.id,
                store_id,
                len(segments),
            )

        return ProductTimeline(
            product_id=product.id,
            product_name=product.name,
            brand=product.brand,
            category=product.category,
            stores=stores,
        )


def build_segments(
    observations: Sequence[PriceObservation],
    discounts: Sequence[Discount],
    start: date | None = None,
    end: date | None = None,
) -> list[PriceSegment]:
    """Cut one store's observations and discounts into segments.

    The timeline runs from ``start`` (default: first entry date) to
    ``end`` (default: last entry date, or ``start`` if that is later, so
    the last price carries forward).  Days before the first observation
    have no price and are not covered.
    """
    if not observations:
        return []

    ordered = sorted(observations, key=lambda o: o.entry_date)
    first_day = start or ordered[0].entry_date
    last_day = end or max(ordered[-1].entry_date, first_day)

    segments: list[PriceSegment] = []
    for i, obs in enumerate(ordered):
        if i + 1 < len(ordered):
            window_end = ordered[i + 1].entry_date - _ONE_DAY
        else:
            window_end = last_day
        window_start = max(obs.entry_date, first_day)
        window_end = min(window_end, last_day)
        if window_start > window_end:
            continue
        segments.extend(
            _cut_window(obs.price, discounts, window_start, window_end)
        )
    return segments


def _cut_window(
    price: Decimal,
    discounts: Sequence[Discount],
    window_start: date,
    window_end: date,
) -> list[PriceSegment]:
    """Split one price window wherever the applicable discount changes."""
    pieces: list[tuple[date, date, Discount | None]] = []
    day = window_start
    while day <= window_end:
        active = _applicable_on(discounts, day)
        piece_end = min(_next_boundary(discounts, day), window_end + _ONE_DAY)
        piece_end -= _ONE_DAY
        if pieces and pieces[-1][2] is active:
            pieces[-1] = (pieces[-1][0], piece_end, active)
        else:
            pieces.append((day, piece_end, active))
        day = piece_end + _ONE_DAY

    return [_to_segment(price, s, e, d) for s, e, d in pieces]


def _applicable_on(
    discounts: Sequence[Discount], day: date,
) -> Discount | None:
    """The discount in force on ``day`` for an already-narrowed list."""
    if not discounts:
        return None
    first = discounts[0]
    return DiscountIndex.applicable(
        discounts, first.product_id, first.store_id, day,
    )


def _next_boundary(discounts: Sequence[Discount], day: date) -> date:
    """First day after ``day`` on which any discount starts or stops."""
    boundary = date.max
    for d in discounts:
        if d.from_date > day:
            boundary = min(boundary, d.from_date)
        if d.to_date >= day and d.to_date < date.max:
            boundary = min(boundary, d.to_date + _ONE_DAY)
    return boundary


def _to_segment(
    price: Decimal,
    start: date,
    end: date,
    discount: Discount | None,
) -> PriceSegment:
    """Attach final price and percentage to a date range."""
    if discount is None:
        return PriceSegment(
            start_date=start,
            end_date=end,
            original_price=price,
            final_price=price,
            discount_percentage=Decimal(0),
        )
    return PriceSegment(
        start_date=start,
        end_date=end,
        original_price=price,
        final_price=DiscountIndex.apply_discount(price, discount.percentage),
        discount_percentage=discount.percentage,
    )
