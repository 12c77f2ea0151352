# tests/test_discount_index.py

"""Tests for discount predicates, lookups and percentage math."""

import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from price_comparator.config.settings import Settings
from price_comparator.models.discount import Discount
from price_comparator.pricing.discount_index import DiscountIndex


def _d(day: int) -> date:
    """A day in May 2025."""
    return date(2025, 5, day)


def _make_discount(
    percentage: str,
    from_day: int,
    to_day: int,
    product_id: str = "P001",
    store_id: int = 1,
    entry_day: int | None = None,
) -> Discount:
    """Create a discount over days of May 2025."""
    return Discount(
        product_id=product_id,
        store_id=store_id,
        percentage=Decimal(percentage),
        from_date=_d(from_day),
        to_date=_d(to_day),
        entry_date=_d(entry_day if entry_day is not None else from_day),
    )


class TestTemporalPredicates(unittest.TestCase):
    """Active / upcoming / expired classification."""

    def setUp(self) -> None:
        """A discount running from the 5th to the 7th."""
        self.discount = _make_discount("10", 5, 7)

    def test_active_inclusive_bounds(self) -> None:
        """Both the first and last day count as active."""
        self.assertTrue(DiscountIndex.is_active(self.discount, _d(5)))
        self.assertTrue(DiscountIndex.is_active(self.discount, _d(6)))
        self.assertTrue(DiscountIndex.is_active(self.discount, _d(7)))

    def test_inactive_outside_window(self) -> None:
        """The day before and the day after are not active."""
        self.assertFalse(DiscountIndex.is_active(self.discount, _d(4)))
        self.assertFalse(DiscountIndex.is_active(self.discount, _d(8)))

    def test_upcoming(self) -> None:
        """Upcoming only before the window starts."""
        self.assertTrue(DiscountIndex.is_upcoming(self.discount, _d(4)))
        self.assertFalse(DiscountIndex.is_upcoming(self.discount, _d(5)))

    def test_expired(self) -> None:
        """Expired only after the window ends."""
        self.assertTrue(DiscountIndex.is_expired(self.discount, _d(8)))
        self.assertFalse(DiscountIndex.is_expired(self.discount, _d(7)))

    def test_default_date_is_reference_date(self) -> None:
        """Without a date the configured reference date is used."""
        with patch.object(Settings, "REFERENCE_DATE", "2025-05-06"):
            self.assertTrue(DiscountIndex.is_active(self.discount))
            self.assertFalse(DiscountIndex.is_upcoming(self.discount))
            self.assertFalse(DiscountIndex.is_expired(self.discount))
        with patch.object(Settings, "REFERENCE_DATE", "2025-05-01"):
            self.assertTrue(DiscountIndex.is_upcoming(self.discount))


class TestApplyDiscount(unittest.TestCase):
    """Percentage application with two-stage rounding."""

    def test_twenty_percent(self) -> None:
        """9.00 with 20% off is 7.20."""
        self.assertEqual(
            DiscountIndex.apply_discount(Decimal("9.00"), Decimal("20")),
            Decimal("7.20"),
        )

    def test_zero_percent_keeps_price(self) -> None:
        """0% leaves the price untouched."""
        self.assertEqual(
            DiscountIndex.apply_discount(Decimal("12.34"), Decimal("0")),
            Decimal("12.34"),
        )

    def test_full_discount(self) -> None:
        """100% makes the product free."""
        self.assertEqual(
            DiscountIndex.apply_discount(Decimal("5.49"), Decimal("100")),
            Decimal("0.00"),
        )

    def test_multiplier_rounded_before_applying(self) -> None:
        """12.5% becomes a 0.13 cut, so 10.00 drops to 8.70, not 8.75."""
        self.assertEqual(
            DiscountIndex.apply_discount(Decimal("10.00"), Decimal("12.5")),
            Decimal("8.70"),
        )

    def test_final_price_rounded_half_up(self) -> None:
        """9.99 with a 0.67 multiplier is 6.6933, rounded to 6.69."""
        self.assertEqual(
            DiscountIndex.apply_discount(Decimal("9.99"), Decimal("33.333")),
            Decimal("6.69"),
        )

    def test_never_exceeds_original(self) -> None:
        """A discount never raises the price."""
        prices = [Decimal("0"), Decimal("0.01"), Decimal("3.33"),
                  Decimal("19.99"), Decimal("250.00")]
        for price in prices:
            for pct in range(0, 101, 5):
                with self.subTest(price=price, pct=pct):
                    self.assertLessEqual(
                        DiscountIndex.apply_discount(price, Decimal(pct)),
                        price,
                    )


class TestLookups(unittest.TestCase):
    """Selecting and listing discounts."""

    def test_applicable_ignores_other_products_and_stores(self) -> None:
        """Only the requested (product, store) pair is considered."""
        discounts = [
            _make_discount("50", 1, 10, product_id="P002"),
            _make_discount("40", 1, 10, store_id=2),
            _make_discount("10", 1, 10),
        ]
        chosen = DiscountIndex.applicable(discounts, "P001", 1, _d(5))
        self.assertIsNotNone(chosen)
        assert chosen is not None
        self.assertEqual(chosen.percentage, Decimal("10"))

    def test_applicable_highest_percentage_wins(self) -> None:
        """Overlapping discounts resolve to the deepest cut."""
        discounts = [
            _make_discount("10", 1, 10),
            _make_discount("25", 4, 6),
        ]
        chosen = DiscountIndex.applicable(discounts, "P001", 1, _d(5))
        assert chosen is not None
        self.assertEqual(chosen.percentage, Decimal("25"))

    def test_applicable_tie_prefers_earliest_start(self) -> None:
        """Equal percentages resolve to the one that started first."""
        later = _make_discount("15", 3, 10)
        earlier = _make_discount("15", 1, 10)
        chosen = DiscountIndex.applicable([later, earlier], "P001", 1, _d(5))
        self.assertIs(chosen, earlier)

    def test_applicable_none_when_inactive(self) -> None:
        """No active discount means None."""
        discounts = [_make_discount("10", 1, 3)]
        self.assertIsNone(
            DiscountIndex.applicable(discounts, "P001", 1, _d(5))
        )

    def test_active_listing(self) -> None:
        """Only discounts covering the date are listed."""
        discounts = [
            _make_discount("10", 1, 3),
            _make_discount("20", 2, 8),
            _make_discount("30", 9, 12),
        ]
        active = DiscountIndex.active(discounts, _d(3))
        self.assertEqual(
            [d.percentage for d in active], [Decimal("10"), Decimal("20")],
        )

    def test_best_per_product(self) -> None:
        """One discount per product, deepest first."""
        discounts = [
            _make_discount("10", 1, 10, product_id="P001"),
            _make_discount("35", 1, 10, product_id="P001"),
            _make_discount("20", 1, 10, product_id="P002"),
            _make_discount("50", 20, 25, product_id="P003"),
        ]
        best = DiscountIndex.best_per_product(discounts, _d(5))
        self.assertEqual(
            [(d.product_id, d.percentage) for d in best],
            [("P001", Decimal("35")), ("P002", Decimal("20"))],
        )

    def test_best_per_product_tie_prefers_earliest_start(self) -> None:
        """Equal percentages at two stores go to the earlier start."""
        later = _make_discount("10", 3, 10, store_id=2)
        earlier = _make_discount("10", 1, 10, store_id=1)
        best = DiscountIndex.best_per_product([later, earlier], _d(4))
        self.assertEqual(best, [earlier])

    def test_new_discounts(self) -> None:
        """Published by today, started since yesterday, active today."""
        fresh = _make_discount("10", 2, 9, product_id="P001", entry_day=2)
        old = _make_discount("10", 1, 9, product_id="P002", entry_day=1)
        unpublished = _make_discount("10", 3, 9, product_id="P003", entry_day=4)
        ended = _make_discount("10", 2, 2, product_id="P004", entry_day=2)
        result = DiscountIndex.new_discounts(
            [fresh, old, unpublished, ended], _d(3), days=1,
        )
        self.assertEqual(result, [fresh])

    def test_new_discounts_default_window(self) -> None:
        """The look-back window defaults to the configured days."""
        fresh = _make_discount("10", 2, 9, entry_day=2)
        with patch.object(Settings, "NEW_DISCOUNT_DAYS", 0):
            self.assertEqual(
                DiscountIndex.new_discounts([fresh], _d(3)), [],
            )
        with patch.object(Settings, "NEW_DISCOUNT_DAYS", 1):
            self.assertEqual(
                DiscountIndex.new_discounts([fresh], _d(3)), [fresh],
            )

    def test_by_entry_date_and_store(self) -> None:
        """Plain filters over entry date and store."""
        a = _make_discount("10", 1, 5, store_id=1, entry_day=1)
        b = _make_discount("10", 1, 5, store_id=2, entry_day=2)
        self.assertEqual(DiscountIndex.by_entry_date([a, b], _d(2)), [b])
        self.assertEqual(DiscountIndex.by_store([a, b], 1), [a])


if __name__ == "__main__":
    unittest.main()
