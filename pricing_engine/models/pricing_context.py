"""PricingContext: per-calculation configuration, never persisted."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from ..pipeline.rounding import Number, round_half_away_from_zero, validate_precision

Rounder = Callable[[Number, int], Decimal]


@dataclass(frozen=True)
class PricingContext:
    """Configuration for one pricing run.

    Attributes:
        is_inter: True selects the inter-jurisdiction rule set, False intra
        precision: Decimal places for every rounded figure
        tax_exemption: Zero all taxes when True
        rounding_adjustment: Round the grand total to a whole unit and
            report the difference as rounding_adjustment
        is_before_tax: Shipping is charged before tax, so it is taxed and
            counts towards the taxable amount
        item_wise_shipping_tax: Tax each line's shipping with that line's
            components instead of one cart-wide rate
        rounder: Rounding strategy (value, precision) -> Decimal
    """

    is_inter: bool = True
    precision: int = 2
    tax_exemption: bool = False
    rounding_adjustment: bool = False
    is_before_tax: bool = False
    item_wise_shipping_tax: bool = False
    rounder: Rounder = round_half_away_from_zero

    def __post_init__(self):
        validate_precision(self.precision)

    def round(self, value: Number) -> Decimal:
        """Round value at this context's precision with its rounder."""
        return self.rounder(value, self.precision)
