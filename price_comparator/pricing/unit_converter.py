# price_comparator/pricing/unit_converter.py

"""Conversion between compatible package units and price-per-unit math."""

import logging
from decimal import Decimal

from price_comparator.errors import InvalidArgument, UnsupportedConversion
from price_comparator.models.product import Unit
from price_comparator.pricing.money import round_money, round_precise

logger = logging.getLogger("price_comparator.units")

# (larger unit, smaller unit) -> how many smaller units make one larger
_FACTORS: dict[tuple[Unit, Unit], Decimal] = {
    (Unit.KILOGRAMS, Unit.GRAMS): Decimal(1000),
    (Unit.LITERS, Unit.MILLILITERS): Decimal(1000),
}


class UnitConverter:
    """Pure conversions between units of the same measurement category.

    Units must share a measurement category; within one, only
    kilograms/grams and liters/milliliters have a conversion factor.
    Any other pair of distinct units raises :class:`UnsupportedConversion`.
    """

    @staticmethod
    def can_convert(from_unit: Unit, to_unit: Unit) -> bool:
        """Return ``True`` when ``convert`` accepts this unit pair."""
        if from_unit.category is not to_unit.category:
            return False
        return (
            from_unit == to_unit
            or (from_unit, to_unit) in _FACTORS
            or (to_unit, from_unit) in _FACTORS
        )

    @staticmethod
    def convert(value: Decimal, from_unit: Unit, to_unit: Unit) -> Decimal:
        """Express a quantity of ``from_unit`` in ``to_unit``.

        Multiplications are exact; divisions are rounded to six
        fractional digits, half-up.
        """
        if not UnitConverter.can_convert(from_unit, to_unit):
            msg = (
                f"Unsupported unit conversion: from {from_unit.abbreviation} "
                f"to {to_unit.abbreviation}"
            )
            raise UnsupportedConversion(msg)
        if from_unit == to_unit:
            return value
        factor = _FACTORS.get((from_unit, to_unit))
        if factor is not None:
            return value * factor
        return round_precise(value / _FACTORS[(to_unit, from_unit)])

    @staticmethod
    def price_per_unit(
        price: Decimal,
        quantity: Decimal,
        unit: Unit,
        target_unit: Unit | None = None,
    ) -> Decimal:
        """Price of one ``target_unit`` (default ``unit``) of a package.

        ``price / quantity`` is kept at six fractional digits until the
        final rescale, then rounded to cents.  Rescaling goes the opposite
        way to a quantity conversion: 4.00 per kg is 0.004 per g.
        """
        if quantity is None or quantity <= 0:
            msg = f"Package quantity must be positive, got {quantity}"
            raise InvalidArgument(msg)

        per_unit = round_precise(price / quantity)

        if target_unit is not None and target_unit != unit:
            if not UnitConverter.can_convert(unit, target_unit):
                msg = (
                    f"Unsupported unit conversion: from {unit.abbreviation} "
                    f"to {target_unit.abbreviation}"
                )
                raise UnsupportedConversion(msg)
            # One target unit holds convert(1, target_unit, unit) of `unit`
            per_unit = UnitConverter.convert(per_unit, target_unit, unit)

        return round_money(per_unit)
