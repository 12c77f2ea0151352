# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

from price_comparator.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the reference date."""

    def test_reference_date_uses_configured_value(self) -> None:
        """A configured ISO date is returned as-is."""
        with patch.object(Settings, "REFERENCE_DATE", "2025-05-03"):
            self.assertEqual(Settings.reference_date(), date(2025, 5, 3))

    def test_reference_date_defaults_to_today(self) -> None:
        """An empty setting means the real current date."""
        with patch.object(Settings, "REFERENCE_DATE", ""):
            self.assertEqual(Settings.reference_date(), date.today())

    def test_reference_date_rejects_garbage(self) -> None:
        """A non-ISO value is a configuration error."""
        with patch.object(Settings, "REFERENCE_DATE", "yesterday"):
            with self.assertRaises(ValueError):
                Settings.reference_date()

    def test_money_places_are_cents(self) -> None:
        """Final prices are rounded to two decimals."""
        self.assertEqual(Settings.MONEY_PLACES, Decimal("0.01"))

    def test_precision_places_are_six_digits(self) -> None:
        """Intermediate divisions keep six decimals."""
        self.assertEqual(Settings.PRECISION_PLACES, Decimal("0.000001"))

    def test_new_discount_days_non_negative(self) -> None:
        """NEW_DISCOUNT_DAYS must be >= 0."""
        self.assertGreaterEqual(Settings.NEW_DISCOUNT_DAYS, 0)

    def test_csv_separator_is_single_char(self) -> None:
        """csv.DictReader needs a one-character delimiter."""
        self.assertEqual(len(Settings.CSV_SEPARATOR), 1)

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.DATA_DIR, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)
        self.assertIsInstance(Settings.PRICE_DB_PATH, Path)


if __name__ == "__main__":
    unittest.main()
