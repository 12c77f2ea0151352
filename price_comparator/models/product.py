# price_comparator/models/product.py

"""Product and package-unit models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto

from price_comparator.errors import InvalidArgument


class UnitCategory(Enum):
    """Measurement dimension a package unit belongs to."""

    WEIGHT = auto()
    VOLUME = auto()
    COUNTABLE = auto()


class Unit(Enum):
    """Package units, valued by their abbreviation as found in price lists."""

    GRAMS = "g"
    KILOGRAMS = "kg"
    MILLILITERS = "ml"
    LITERS = "l"
    PIECES = "buc"
    ROLLS = "role"

    @property
    def abbreviation(self) -> str:
        """Short label used in price lists and CLI output."""
        return self.value

    @property
    def category(self) -> UnitCategory:
        """The measurement dimension of this unit."""
        return _UNIT_CATEGORIES[self]

    @classmethod
    def from_abbreviation(cls, abbr: str) -> "Unit":
        """Look up a unit by abbreviation, ignoring case and whitespace."""
        key = abbr.strip().lower() if abbr else ""
        for unit in cls:
            if unit.value == key:
                return unit
        msg = f"Unknown unit abbreviation: '{abbr}'"
        raise InvalidArgument(msg)


_UNIT_CATEGORIES: dict[Unit, UnitCategory] = {
    Unit.GRAMS: UnitCategory.WEIGHT,
    Unit.KILOGRAMS: UnitCategory.WEIGHT,
    Unit.MILLILITERS: UnitCategory.VOLUME,
    Unit.LITERS: UnitCategory.VOLUME,
    Unit.PIECES: UnitCategory.COUNTABLE,
    Unit.ROLLS: UnitCategory.COUNTABLE,
}


@dataclass(frozen=True)
class Product:
    """A catalogue product sold in one fixed package size."""

    id: str
    name: str
    category: str
    brand: str
    package_quantity: Decimal
    package_unit: Unit
