"""Pipeline stages for cart pricing and tax computation."""

from .rounding import InvalidPrecisionError, round_half_away_from_zero

__all__ = ["InvalidPrecisionError", "round_half_away_from_zero"]
