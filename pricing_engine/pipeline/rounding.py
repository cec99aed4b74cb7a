"""Shared rounding for every price and tax figure the engine produces."""

from decimal import ROUND_HALF_UP, Decimal
from numbers import Integral
from typing import Union

from .number_normalizer import to_decimal

Number = Union[Decimal, int, float, str]


class InvalidPrecisionError(ValueError):
    """Raised when a rounding precision is negative or not an integer."""
    pass


def validate_precision(precision) -> int:
    """Return precision as int or raise InvalidPrecisionError.

    Booleans are rejected even though they are ints, since True would
    silently mean one decimal place.
    """
    if isinstance(precision, bool) or not isinstance(precision, Integral):
        raise InvalidPrecisionError(
            f"precision must be a non-negative integer, got {precision!r}"
        )
    if precision < 0:
        raise InvalidPrecisionError(
            f"precision must be >= 0, got {precision}"
        )
    return int(precision)


def round_half_away_from_zero(value: Number, precision: int) -> Decimal:
    """Round value to `precision` decimal places, ties away from zero.

    Args:
        value: Amount to round. Floats go through str() so 1.005 rounds
            as written instead of as its binary approximation.
        precision: Number of decimal places (>= 0)

    Returns:
        Rounded Decimal

    Raises:
        InvalidPrecisionError: If precision is negative or not an integer
    """
    places = validate_precision(precision)
    amount = value if isinstance(value, Decimal) else to_decimal(value)
    # ROUND_HALF_UP in decimal rounds 0.5 away from zero for both signs
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
