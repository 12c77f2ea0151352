# price_comparator/errors.py

"""Exception taxonomy raised by the price comparator engine.

An *unresolvable* price, discount or alert condition is not an error: it
is reported as ``None`` or an empty collection by the component that hit
it.  Only malformed input, missing references and impossible unit
conversions raise.
"""


class PriceComparatorError(Exception):
    """Base class for every error the engine raises."""


class InvalidArgument(PriceComparatorError, ValueError):
    """Caller input is missing or malformed."""


class NotFound(PriceComparatorError, LookupError):
    """A referenced product, store or alert does not exist."""


class UnsupportedConversion(PriceComparatorError, ValueError):
    """Two measurement units cannot be converted into one another."""
