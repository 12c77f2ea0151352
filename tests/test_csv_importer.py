# tests/test_csv_importer.py

"""Tests for reading price and discount CSV files."""

import shutil
import tempfile
import unittest
from datetime import date
from decimal import Decimal
from pathlib import Path

from price_comparator.errors import InvalidArgument
from price_comparator.models.product import Unit
from price_comparator.storage.csv_importer import CsvImporter, parse_file_name

PRICE_HEADER = (
    "product_id;product_name;product_category;brand;"
    "package_quantity;package_unit;price;currency\n"
)
DISCOUNT_HEADER = (
    "product_id;product_name;brand;package_quantity;package_unit;"
    "product_category;from_date;to_date;percentage_of_discount\n"
)


class TestParseFileName(unittest.TestCase):
    """Store and date extraction from file names."""

    def test_price_file(self) -> None:
        """``<store>_<date>.csv`` is a price list."""
        self.assertEqual(
            parse_file_name("lidl_2025-05-01.csv"),
            ("lidl", False, date(2025, 5, 1)),
        )

    def test_discount_file(self) -> None:
        """``<store>_discounts_<date>.csv`` is a discount list."""
        self.assertEqual(
            parse_file_name("kaufland_discounts_2025-05-08.csv"),
            ("kaufland", True, date(2025, 5, 8)),
        )

    def test_bad_date(self) -> None:
        """An unparseable date is rejected."""
        with self.assertRaises(InvalidArgument):
            parse_file_name("lidl_2025-13-01.csv")

    def test_bad_shape(self) -> None:
        """Too many or too few parts are rejected."""
        for name in ("lidl.csv", "lidl_promo_x_2025-05-01.csv",
                     "lidl_offers_2025-05-01.csv"):
            with self.subTest(name=name):
                with self.assertRaises(InvalidArgument):
                    parse_file_name(name)


class TestCsvImporter(unittest.TestCase):
    """Row parsing and error collection."""

    def setUp(self) -> None:
        """Create a temporary data directory."""
        self.tmpdir = Path(tempfile.mkdtemp())
        self.importer = CsvImporter()

    def tearDown(self) -> None:
        """Remove the temporary directory."""
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, name: str, content: str) -> Path:
        path = self.tmpdir / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_price_rows(self) -> None:
        """Rows become typed entries tagged with store and date."""
        self._write(
            "lidl_2025-05-01.csv",
            PRICE_HEADER
            + "P001;lapte zuzu;lactate;Zuzu;1;l;9.90;RON\n"
            + "P002;oua;oua;Ferma;10;BUC;13,50;\n",
        )
        report = self.importer.import_directory(self.tmpdir)
        self.assertTrue(report.ok)
        self.assertEqual(report.files_read, 1)
        first, second = report.price_entries
        self.assertEqual(first.store, "lidl")
        self.assertEqual(first.entry_date, date(2025, 5, 1))
        self.assertEqual(first.price, Decimal("9.90"))
        self.assertEqual(first.package_unit, Unit.LITERS)
        self.assertEqual(second.price, Decimal("13.50"))
        self.assertEqual(second.package_unit, Unit.PIECES)
        self.assertEqual(second.currency, "RON")

    def test_discount_rows(self) -> None:
        """Discount files yield discount entries."""
        self._write(
            "lidl_discounts_2025-05-01.csv",
            DISCOUNT_HEADER
            + "P001;lapte zuzu;Zuzu;1;l;lactate;2025-05-01;2025-05-07;10\n",
        )
        report = self.importer.import_directory(self.tmpdir)
        self.assertTrue(report.ok)
        (entry,) = report.discount_entries
        self.assertEqual(entry.percentage, Decimal("10"))
        self.assertEqual(entry.from_date, date(2025, 5, 1))
        self.assertEqual(entry.to_date, date(2025, 5, 7))
        self.assertEqual(report.rows_imported, 1)

    def test_bad_rows_reported_not_fatal(self) -> None:
        """Good rows survive next to rejected ones."""
        self._write(
            "lidl_2025-05-01.csv",
            PRICE_HEADER
            + "P001;lapte;lactate;Zuzu;1;l;abc;RON\n"
            + "P002;oua;oua;Ferma;10;dozen;13.50;RON\n"
            + "P003;paine;panificatie;Vel;500;g;-1;RON\n"
            + "P004;unt;lactate;Pilos;200;g;7.20;RON\n",
        )
        report = self.importer.import_directory(self.tmpdir)
        self.assertFalse(report.ok)
        self.assertEqual([e.product_id for e in report.price_entries], ["P004"])
        self.assertEqual(len(report.errors), 3)
        self.assertTrue(report.errors[0].startswith("lidl_2025-05-01.csv:2"))

    def test_bad_discount_rows(self) -> None:
        """Out-of-range percentages and reversed windows are rejected."""
        self._write(
            "lidl_discounts_2025-05-01.csv",
            DISCOUNT_HEADER
            + "P001;lapte;Zuzu;1;l;lactate;2025-05-01;2025-05-07;120\n"
            + "P001;lapte;Zuzu;1;l;lactate;2025-05-07;2025-05-01;10\n"
            + "P001;lapte;Zuzu;1;l;lactate;someday;2025-05-07;10\n",
        )
        report = self.importer.import_directory(self.tmpdir)
        self.assertEqual(report.discount_entries, [])
        self.assertEqual(len(report.errors), 3)

    def test_bad_file_name_skipped(self) -> None:
        """Files with unrecognised names are reported and skipped."""
        self._write("notes.csv", PRICE_HEADER)
        report = self.importer.import_directory(self.tmpdir)
        self.assertEqual(report.files_read, 0)
        self.assertEqual(len(report.errors), 1)

    def test_missing_columns(self) -> None:
        """A price file without the price column is rejected whole."""
        self._write(
            "lidl_2025-05-01.csv",
            "product_id;product_name\nP001;lapte\n",
        )
        report = self.importer.import_directory(self.tmpdir)
        self.assertEqual(report.price_entries, [])
        self.assertIn("price", report.errors[0])

    def test_files_processed_in_name_order(self) -> None:
        """Earlier dates are read first."""
        row = "P001;lapte;lactate;Zuzu;1;l;9.90;RON\n"
        self._write("lidl_2025-05-08.csv", PRICE_HEADER + row)
        self._write("lidl_2025-05-01.csv", PRICE_HEADER + row)
        report = self.importer.import_directory(self.tmpdir)
        self.assertEqual(
            [e.entry_date for e in report.price_entries],
            [date(2025, 5, 1), date(2025, 5, 8)],
        )

    def test_missing_directory(self) -> None:
        """A directory that does not exist is an error."""
        with self.assertRaises(InvalidArgument):
            self.importer.import_directory(self.tmpdir / "nope")

    def test_import_single_file(self) -> None:
        """A single file can be imported without a directory scan."""
        path = self._write(
            "mega_2025-05-01.csv",
            PRICE_HEADER + "P001;lapte;lactate;Zuzu;1;l;9.90;RON\n",
        )
        report = self.importer.import_file(path)
        self.assertEqual(report.price_entries[0].store, "mega")


if __name__ == "__main__":
    unittest.main()
