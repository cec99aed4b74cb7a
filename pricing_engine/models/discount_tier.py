"""DiscountTier data model for quantity-tiered product discounts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from ..pipeline.number_normalizer import optional_decimal, to_decimal_or_default


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class DiscountTier:
    """A quantity range carrying a discount percentage.

    Frozen: changing a line's discount means replacing its tier, never
    editing it.

    Attributes:
        value: Discount percentage (0-100)
        min_quantity: Inclusive lower bound
        max_quantity: Inclusive upper bound, None for an open-ended tier
        cant_combine: True if the tier may not be stacked with a cart-level
            volume discount
        pricing_condition_code: Optional ERP pricing condition reference
    """

    value: Decimal
    min_quantity: Decimal
    max_quantity: Optional[Decimal] = None
    cant_combine: bool = False
    pricing_condition_code: Optional[str] = None

    def contains(self, quantity: Decimal) -> bool:
        """True if quantity lies in [min_quantity, max_quantity].

        A tier whose bounds are inverted contains nothing.
        """
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiscountTier':
        """Create from either naming family used by discount data sources.

        Accepts `Value/min_qty/max_qty` (price list discounts) as well as
        `value/minQuantity/maxQuantity`.
        """
        return cls(
            value=to_decimal_or_default(_first_present(data, 'value', 'Value')),
            min_quantity=to_decimal_or_default(_first_present(data, 'minQuantity', 'min_qty')),
            max_quantity=optional_decimal(_first_present(data, 'maxQuantity', 'max_qty')),
            cant_combine=bool(data.get('CantCombineWithOtherDisCounts', data.get('cantCombine', False))),
            pricing_condition_code=data.get('pricingConditionCode'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'minQuantity': self.min_quantity,
            'maxQuantity': self.max_quantity,
            'cantCombine': self.cant_combine,
            'pricingConditionCode': self.pricing_condition_code,
        }


@dataclass(frozen=True)
class DiscountResolution:
    """Result of tier resolution for one quantity.

    suitable_discount is None when no tier applies; that means "no
    discount", not an error.
    """

    suitable_discount: Optional[DiscountTier] = None
    next_suitable_discount: Optional[DiscountTier] = None
