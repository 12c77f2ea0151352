# price_comparator/config/settings.py

"""Central configuration for the price comparator engine."""

import os
from datetime import date
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_path(name: str, default: Path) -> Path:
    """Read a path from the environment, falling back to *default*."""
    raw = os.getenv(name, "").strip()
    return Path(raw) if raw else default


class Settings:
    """Central configuration for the price comparator engine."""

    # --- Reference date ---
    # ISO date pinning "today" for every date-less request; empty = real today
    REFERENCE_DATE: str = os.getenv(
        "PRICE_COMPARATOR_REFERENCE_DATE", ""
    ).strip()

    # --- Pricing ---
    DEFAULT_CURRENCY: str = "RON"
    MONEY_PLACES: Decimal = Decimal("0.01")       # Final prices
    PRECISION_PLACES: Decimal = Decimal("0.000001")  # Intermediate division
    NEW_DISCOUNT_DAYS: int = 1          # Look-back window for "new" discounts

    # --- Ingestion ---
    CSV_SEPARATOR: str = ";"
    CSV_DATE_FORMAT: str = "%Y-%m-%d"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = _env_path("PRICE_COMPARATOR_DATA_DIR", BASE_DIR / "data")
    LOGS_DIR: Path = BASE_DIR / "logs"
    PRICE_DB_PATH: Path = _env_path(
        "PRICE_COMPARATOR_DB_PATH", BASE_DIR / "data" / "prices.db"
    )

    @classmethod
    def reference_date(cls) -> date:
        """Return the configured reference date, or today when unset.

        Raises ``ValueError`` if the configured value is not an ISO date.
        """
        if cls.REFERENCE_DATE:
            return date.fromisoformat(cls.REFERENCE_DATE)
        return date.today()
