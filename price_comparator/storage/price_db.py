# price_comparator/storage/price_db.py

"""SQLite-backed store for imported products, prices and discounts."""

import logging
import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path

from price_comparator.config.settings import Settings
from price_comparator.models.discount import Discount
from price_comparator.models.price_observation import PriceObservation
from price_comparator.models.product import Product, Unit
from price_comparator.models.store import Store
from price_comparator.storage.csv_importer import (
    DiscountEntry,
    ImportReport,
    PriceEntry,
)
from price_comparator.storage.record_store import RecordStore

logger = logging.getLogger("price_comparator.price_db")

# Amounts are stored as TEXT so Decimal values round-trip exactly
_SCHEMA = """\
CREATE TABLE IF NOT EXISTS stores (
    id   INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT    NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS products (
    id               TEXT PRIMARY KEY,
    name             TEXT NOT NULL,
    category         TEXT NOT NULL,
    brand            TEXT NOT NULL,
    package_quantity TEXT NOT NULL,
    package_unit     TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS prices (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id TEXT    NOT NULL
               REFERENCES products(id) ON DELETE CASCADE,
    store_id   INTEGER NOT NULL
               REFERENCES stores(id) ON DELETE CASCADE,
    price      TEXT    NOT NULL,
    currency   TEXT    NOT NULL DEFAULT 'RON',
    entry_date TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS discounts (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    product_id TEXT    NOT NULL
               REFERENCES products(id) ON DELETE CASCADE,
    store_id   INTEGER NOT NULL
               REFERENCES stores(id) ON DELETE CASCADE,
    percentage TEXT    NOT NULL,
    from_date  TEXT    NOT NULL,
    to_date    TEXT    NOT NULL,
    entry_date TEXT    NOT NULL
);

-- One price per product, store and day; one discount per window and entry day
CREATE UNIQUE INDEX IF NOT EXISTS uq_prices_product_store_date
    ON prices(product_id, store_id, entry_date);

CREATE UNIQUE INDEX IF NOT EXISTS uq_discounts_product_store_window
    ON discounts(product_id, store_id, from_date, to_date, entry_date);
"""


class PriceDB:
    """SQLite persistence for the records the engine reads."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.PRICE_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(_SCHEMA)
        logger.debug("PriceDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Recording ────────────────────────────────────────

    def _store_id(self, cur: sqlite3.Cursor, name: str) -> int:
        """Find or create a store by name."""
        cur.execute(
            "INSERT INTO stores (name) VALUES (?) "
            "ON CONFLICT(name) DO NOTHING",
            (name,),
        )
        store_id: int = cur.execute(
            "SELECT id FROM stores WHERE name = ?",
            (name,),
        ).fetchone()[0]
        return store_id

    def _ensure_product(
        self, cur: sqlite3.Cursor, entry: PriceEntry | DiscountEntry,
    ) -> None:
        """Create the product on first sight; later rows never overwrite it."""
        cur.execute(
            "INSERT INTO products "
            "(id, name, category, brand, package_quantity, package_unit) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(id) DO NOTHING",
            (
                entry.product_id,
                entry.product_name,
                entry.category,
                entry.brand,
                str(entry.package_quantity),
                entry.package_unit.abbreviation,
            ),
        )

    def save_report(self, report: ImportReport) -> int:
        """Persist every entry of an import report.

        Re-saving rows already stored is a no-op; a row for the same
        product, store and day (or discount window) replaces the stored
        values.  Returns the number of rows inserted or changed.
        """
        cur = self._conn.cursor()
        count = 0

        for p in report.price_entries:
            self._ensure_product(cur, p)
            store_id = self._store_id(cur, p.store)
            cur.execute(
                "INSERT INTO prices "
                "(product_id, store_id, price, currency, entry_date) "
                "VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(product_id, store_id, entry_date) DO UPDATE "
                "SET price = excluded.price, currency = excluded.currency "
                "WHERE prices.price IS NOT excluded.price "
                "   OR prices.currency IS NOT excluded.currency",
                (
                    p.product_id,
                    store_id,
                    str(p.price),
                    p.currency,
                    p.entry_date.isoformat(),
                ),
            )
            count += cur.rowcount

        for d in report.discount_entries:
            self._ensure_product(cur, d)
            store_id = self._store_id(cur, d.store)
            cur.execute(
                "INSERT INTO discounts "
                "(product_id, store_id, percentage, from_date, to_date, "
                " entry_date) "
                "VALUES (?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(product_id, store_id, from_date, to_date, "
                "            entry_date) DO UPDATE "
                "SET percentage = excluded.percentage "
                "WHERE discounts.percentage IS NOT excluded.percentage",
                (
                    d.product_id,
                    store_id,
                    str(d.percentage),
                    d.from_date.isoformat(),
                    d.to_date.isoformat(),
                    d.entry_date.isoformat(),
                ),
            )
            count += cur.rowcount

        self._conn.commit()
        if count:
            logger.info("Recorded %d price/discount rows", count)
        return count

    # ── Loading ──────────────────────────────────────────

    def load(self) -> RecordStore:
        """Snapshot every table into a :class:`RecordStore`."""
        products = [
            Product(
                id=r[0],
                name=r[1],
                category=r[2],
                brand=r[3],
                package_quantity=Decimal(r[4]),
                package_unit=Unit.from_abbreviation(r[5]),
            )
            for r in self._conn.execute(
                "SELECT id, name, category, brand, package_quantity, "
                "       package_unit FROM products ORDER BY id"
            )
        ]
        stores = [
            Store(id=r[0], name=r[1])
            for r in self._conn.execute(
                "SELECT id, name FROM stores ORDER BY id"
            )
        ]
        prices = [
            PriceObservation(
                product_id=r[0],
                store_id=r[1],
                price=Decimal(r[2]),
                currency=r[3],
                entry_date=date.fromisoformat(r[4]),
            )
            for r in self._conn.execute(
                "SELECT product_id, store_id, price, currency, entry_date "
                "FROM prices ORDER BY entry_date, id"
            )
        ]
        discounts = [
            Discount(
                product_id=r[0],
                store_id=r[1],
                percentage=Decimal(r[2]),
                from_date=date.fromisoformat(r[3]),
                to_date=date.fromisoformat(r[4]),
                entry_date=date.fromisoformat(r[5]),
            )
            for r in self._conn.execute(
                "SELECT product_id, store_id, percentage, from_date, "
                "       to_date, entry_date FROM discounts ORDER BY id"
            )
        ]
        records = RecordStore(products, stores, prices, discounts)
        logger.debug("Loaded %r", records)
        return records
