# price_comparator/pricing/money.py

"""Decimal rounding helpers shared by every pricing component."""

from decimal import ROUND_HALF_UP, Decimal

from price_comparator.config.settings import Settings


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return value.quantize(Settings.MONEY_PLACES, rounding=ROUND_HALF_UP)


def round_precise(value: Decimal) -> Decimal:
    """Round to six fractional digits, half-up."""
    return value.quantize(
        Settings.PRECISION_PLACES, rounding=ROUND_HALF_UP
    )
