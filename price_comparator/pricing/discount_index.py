# price_comparator/pricing/discount_index.py

"""Temporal predicates, lookups and percentage math over discounts."""

import logging
from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from price_comparator.config.settings import Settings
from price_comparator.models.discount import Discount
from price_comparator.pricing.money import round_money

logger = logging.getLogger("price_comparator.discounts")

_HUNDRED = Decimal(100)


def _resolve(on: date | None) -> date:
    """Fall back to the configured reference date."""
    return on if on is not None else Settings.reference_date()


class DiscountIndex:
    """Stateless helpers for evaluating discount windows.

    Every predicate takes an explicit reference date; ``None`` means the
    configured reference date (see :meth:`Settings.reference_date`).
    """

    # ── Temporal predicates ──────────────────────────────

    @staticmethod
    def is_active(discount: Discount, on: date | None = None) -> bool:
        """``from_date <= on <= to_date``."""
        day = _resolve(on)
        return discount.from_date <= day <= discount.to_date

    @staticmethod
    def is_upcoming(discount: Discount, on: date | None = None) -> bool:
        """The discount has not started yet."""
        return _resolve(on) < discount.from_date

    @staticmethod
    def is_expired(discount: Discount, on: date | None = None) -> bool:
        """The discount ended before ``on``."""
        return _resolve(on) > discount.to_date

    # ── Price math ───────────────────────────────────────

    @staticmethod
    def apply_discount(price: Decimal, percentage: Decimal) -> Decimal:
        """Return ``price`` reduced by ``percentage`` percent.

        The multiplier ``percentage / 100`` is rounded to two decimals
        before it is applied, and the product is rounded to cents.  Both
        roundings are half-up and both are needed to reproduce published
        cent values.
        """
        multiplier = Decimal(1) - round_money(percentage / _HUNDRED)
        return round_money(price * multiplier)

    # ── Lookups ──────────────────────────────────────────

    @staticmethod
    def applicable(
        discounts: Iterable[Discount],
        product_id: str,
        store_id: int,
        on: date,
    ) -> Discount | None:
        """The discount that applies to a product at a store on ``on``.

        When several overlap, the highest percentage wins, then the
        earliest ``from_date``, then input order.
        """
        best: Discount | None = None
        for d in discounts:
            if d.product_id != product_id or d.store_id != store_id:
                continue
            if not DiscountIndex.is_active(d, on):
                continue
            if best is None or _outranks(d, best):
                best = d
        return best

    @staticmethod
    def active(
        discounts: Iterable[Discount], on: date | None = None,
    ) -> list[Discount]:
        """All discounts active on ``on``."""
        day = _resolve(on)
        return [d for d in discounts if DiscountIndex.is_active(d, day)]

    @staticmethod
    def best_per_product(
        discounts: Iterable[Discount], on: date | None = None,
    ) -> list[Discount]:
        """The highest active discount for each product, best first.

        Equal percentages go to the discount that started first.
        """
        best: dict[str, Discount] = {}
        for d in DiscountIndex.active(discounts, on):
            current = best.get(d.product_id)
            if current is None or _outranks(d, current):
                best[d.product_id] = d
        return sorted(
            best.values(),
            key=lambda d: (-d.percentage, d.product_id),
        )

    @staticmethod
    def new_discounts(
        discounts: Iterable[Discount],
        on: date | None = None,
        days: int | None = None,
    ) -> list[Discount]:
        """Discounts published by ``on`` that started within ``days``.

        A discount is new when its ``entry_date`` is not after ``on``,
        it started at most ``days`` days before ``on`` and it is active
        on ``on``.
        """
        day = _resolve(on)
        window = Settings.NEW_DISCOUNT_DAYS if days is None else days
        since = day - timedelta(days=window)
        fresh = [
            d for d in discounts
            if d.entry_date <= day
            and d.from_date >= since
            and DiscountIndex.is_active(d, day)
        ]
        logger.debug(
            "%d new discounts since %s (as of %s)", len(fresh), since, day,
        )
        return fresh

    @staticmethod
    def by_entry_date(
        discounts: Iterable[Discount], entry_date: date,
    ) -> list[Discount]:
        """Discounts recorded on ``entry_date``."""
        return [d for d in discounts if d.entry_date == entry_date]

    @staticmethod
    def by_store(
        discounts: Iterable[Discount], store_id: int,
    ) -> list[Discount]:
        """Discounts offered by one store."""
        return [d for d in discounts if d.store_id == store_id]


def _outranks(candidate: Discount, incumbent: Discount) -> bool:
    """Tie-break between two simultaneously active discounts."""
    if candidate.percentage != incumbent.percentage:
        return candidate.percentage > incumbent.percentage
    return candidate.from_date < incumbent.from_date
