# price_comparator/storage/csv_importer.py

"""Reads store price lists and discount lists from CSV files.

File names carry the store and the entry date::

    lidl_2025-05-01.csv             prices
    lidl_discounts_2025-05-01.csv   discounts

Malformed files and rows never abort an import; they are collected in
the returned :class:`ImportReport` and logged.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from price_comparator.config.settings import Settings
from price_comparator.errors import InvalidArgument
from price_comparator.models.product import Unit

logger = logging.getLogger("price_comparator.ingest")

_PRICE_COLUMNS: tuple[str, ...] = (
    "product_id", "product_name", "product_category", "brand",
    "package_quantity", "package_unit", "price", "currency",
)

_DISCOUNT_COLUMNS: tuple[str, ...] = (
    "product_id", "product_name", "brand", "package_quantity",
    "package_unit", "product_category", "from_date", "to_date",
    "percentage_of_discount",
)


@dataclass
class PriceEntry:
    """One parsed row of a store price list."""

    store: str
    entry_date: date
    product_id: str
    product_name: str
    category: str
    brand: str
    package_quantity: Decimal
    package_unit: Unit
    price: Decimal
    currency: str


@dataclass
class DiscountEntry:
    """One parsed row of a store discount list."""

    store: str
    entry_date: date
    product_id: str
    product_name: str
    category: str
    brand: str
    package_quantity: Decimal
    package_unit: Unit
    percentage: Decimal
    from_date: date
    to_date: date


@dataclass
class ImportReport:
    """Outcome of importing a directory of CSV files."""

    files_read: int = 0
    price_entries: list[PriceEntry] = field(
        default_factory=lambda: list[PriceEntry]()
    )
    discount_entries: list[DiscountEntry] = field(
        default_factory=lambda: list[DiscountEntry]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def rows_imported(self) -> int:
        """Rows parsed successfully across all files."""
        return len(self.price_entries) + len(self.discount_entries)

    @property
    def ok(self) -> bool:
        """``True`` when no file or row was rejected."""
        return not self.errors


def parse_file_name(filename: str) -> tuple[str, bool, date]:
    """Split a CSV file name into (store, is_discount_file, entry_date)."""
    stem = filename.removesuffix(".csv")
    parts = stem.split("_")
    try:
        if len(parts) == 3 and parts[1] == "discounts":
            return parts[0], True, _parse_date(parts[2])
        if len(parts) == 2:
            return parts[0], False, _parse_date(parts[1])
    except ValueError as exc:
        msg = f"Invalid date in filename {filename}: {exc}"
        raise InvalidArgument(msg) from exc
    msg = f"Invalid filename format for {filename}"
    raise InvalidArgument(msg)


def _parse_date(raw: str) -> date:
    """Parse a date in the configured CSV format."""
    return datetime.strptime(raw.strip(), Settings.CSV_DATE_FORMAT).date()


def _parse_decimal(raw: str, column: str) -> Decimal:
    """Parse a decimal cell, accepting a comma as decimal mark."""
    try:
        return Decimal(raw.strip().replace(",", "."))
    except (InvalidOperation, AttributeError) as exc:
        msg = f"Bad number in column '{column}': {raw!r}"
        raise InvalidArgument(msg) from exc


def _required(row: dict[str, str], column: str) -> str:
    """Return a non-empty cell or raise."""
    value = (row.get(column) or "").strip()
    if not value:
        msg = f"Missing value in column '{column}'"
        raise InvalidArgument(msg)
    return value


class CsvImporter:
    """Parses price and discount CSV files into typed entries."""

    def __init__(self, separator: str | None = None) -> None:
        self.separator = separator or Settings.CSV_SEPARATOR

    def import_directory(self, directory: Path) -> ImportReport:
        """Parse every ``*.csv`` file in ``directory``, oldest name first."""
        report = ImportReport()
        if not directory.is_dir():
            msg = f"Data directory not found: {directory}"
            raise InvalidArgument(msg)

        for filepath in sorted(directory.glob("*.csv")):
            self.import_file(filepath, report)

        logger.info(
            "CSV import complete: %d rows from %d files, %d errors",
            report.rows_imported,
            report.files_read,
            len(report.errors),
        )
        return report

    def import_file(
        self, filepath: Path, report: ImportReport | None = None,
    ) -> ImportReport:
        """Parse one file into ``report`` (a fresh one if omitted)."""
        report = report if report is not None else ImportReport()
        try:
            store, is_discount, entry_date = parse_file_name(filepath.name)
        except InvalidArgument as exc:
            _reject(report, filepath.name, str(exc))
            return report

        try:
            with open(filepath, encoding="utf-8", newline="") as f:
                reader = csv.DictReader(
                    f, delimiter=self.separator, skipinitialspace=True,
                )
                expected = _DISCOUNT_COLUMNS if is_discount else _PRICE_COLUMNS
                missing = [
                    c for c in expected
                    if c not in (reader.fieldnames or [])
                ]
                if missing:
                    _reject(
                        report,
                        filepath.name,
                        f"missing columns {', '.join(missing)}",
                    )
                    return report

                for line_no, row in enumerate(reader, start=2):
                    try:
                        if is_discount:
                            report.discount_entries.append(
                                self._discount_entry(row, store, entry_date)
                            )
                        else:
                            report.price_entries.append(
                                self._price_entry(row, store, entry_date)
                            )
                    except InvalidArgument as exc:
                        _reject(report, f"{filepath.name}:{line_no}", str(exc))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            _reject(report, filepath.name, str(exc))
            return report

        report.files_read += 1
        logger.debug("Parsed %s (store=%s, date=%s)", filepath.name, store, entry_date)
        return report

    @staticmethod
    def _price_entry(
        row: dict[str, str], store: str, entry_date: date,
    ) -> PriceEntry:
        """Build a price entry from a CSV row."""
        price = _parse_decimal(_required(row, "price"), "price")
        if price < 0:
            msg = f"Negative price: {price}"
            raise InvalidArgument(msg)
        return PriceEntry(
            store=store,
            entry_date=entry_date,
            product_id=_required(row, "product_id"),
            product_name=_required(row, "product_name"),
            category=_required(row, "product_category"),
            brand=_required(row, "brand"),
            package_quantity=_parse_decimal(
                _required(row, "package_quantity"), "package_quantity",
            ),
            package_unit=Unit.from_abbreviation(
                _required(row, "package_unit")
            ),
            price=price,
            currency=(row.get("currency") or "").strip()
            or Settings.DEFAULT_CURRENCY,
        )

    @staticmethod
    def _discount_entry(
        row: dict[str, str], store: str, entry_date: date,
    ) -> DiscountEntry:
        """Build a discount entry from a CSV row."""
        percentage = _parse_decimal(
            _required(row, "percentage_of_discount"), "percentage_of_discount",
        )
        if not Decimal(0) <= percentage <= Decimal(100):
            msg = f"Discount percentage out of range: {percentage}"
            raise InvalidArgument(msg)
        try:
            from_date = _parse_date(_required(row, "from_date"))
            to_date = _parse_date(_required(row, "to_date"))
        except ValueError as exc:
            msg = f"Bad discount date: {exc}"
            raise InvalidArgument(msg) from exc
        if from_date > to_date:
            msg = f"Discount ends ({to_date}) before it starts ({from_date})"
            raise InvalidArgument(msg)
        return DiscountEntry(
            store=store,
            entry_date=entry_date,
            product_id=_required(row, "product_id"),
            product_name=_required(row, "product_name"),
            category=_required(row, "product_category"),
            brand=_required(row, "brand"),
            package_quantity=_parse_decimal(
                _required(row, "package_quantity"), "package_quantity",
            ),
            package_unit=Unit.from_abbreviation(
                _required(row, "package_unit")
            ),
            percentage=percentage,
            from_date=from_date,
            to_date=to_date,
        )


def _reject(report: ImportReport, where: str, reason: str) -> None:
    """Record and log a rejected file or row."""
    message = f"{where}: {reason}"
    report.errors.append(message)
    logger.warning("Skipped %s", message)
