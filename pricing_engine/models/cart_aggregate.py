"""Cart-level aggregate models and the plain/volume-overridden variant."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Union

from ..pipeline.number_normalizer import to_decimal_or_default
from .line_item import LineItem

_TOTAL_SUFFIX = "Total"


@dataclass
class CartAggregate:
    """Totals folded over every line item of a cart.

    Per-component tax totals live in `tax_totals` keyed by component name
    and serialize as "<Name>Total". Tax on shipping charged per line is part
    of those totals; shipping_tax holds only a cart-wide shipping tax, so
    total_tax is the component totals plus shipping_tax.
    """

    tax_totals: Dict[str, Decimal] = field(default_factory=dict)
    total_value: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    total_shipping: Decimal = Decimal("0")
    shipping_tax: Decimal = Decimal("0")
    pf_rate: Decimal = Decimal("0")
    taxable_amount: Decimal = Decimal("0")
    insurance_charges: Decimal = Decimal("0")
    calculated_total: Decimal = Decimal("0")
    rounding_adjustment: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")
    total_items: int = 0
    total_lp: Decimal = Decimal("0")
    total_cash_discount: Decimal = Decimal("0")
    total_basic_discount: Decimal = Decimal("0")
    has_products_with_negative_total_price: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'totalValue': self.total_value,
            'totalTax': self.total_tax,
            'totalShipping': self.total_shipping,
            'shippingTax': self.shipping_tax,
            'pfRate': self.pf_rate,
            'taxableAmount': self.taxable_amount,
            'insuranceCharges': self.insurance_charges,
            'calculatedTotal': self.calculated_total,
            'roundingAdjustment': self.rounding_adjustment,
            'grandTotal': self.grand_total,
            'totalItems': self.total_items,
            'totalLP': self.total_lp,
            'totalCashDiscount': self.total_cash_discount,
            'totalBasicDiscount': self.total_basic_discount,
            'hasProductsWithNegativeTotalPrice': self.has_products_with_negative_total_price,
        }
        for name, value in self.tax_totals.items():
            data[f"{name}{_TOTAL_SUFFIX}"] = value
        return data


@dataclass(frozen=True)
class VolumeDiscountEntry:
    """Cart-level volume discount percentage offered for one line.

    Attributes:
        item_no: Line the discount belongs to
        volume_discount: Percentage on top of the line's own discount
        disc_changed: The buyer changed the line discount by hand, which
            allows stacking even when the tier says it can't combine
    """

    item_no: Union[str, int]
    volume_discount: Decimal = Decimal("0")
    disc_changed: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VolumeDiscountEntry':
        percentage = data.get('volumeDiscount')
        if percentage is None:
            percentage = (data.get('volume_discount_obj') or {}).get('Percentage')
        return cls(
            item_no=data.get('itemNo'),
            volume_discount=to_decimal_or_default(percentage),
            disc_changed=bool(data.get('discChanged', False)),
        )


@dataclass
class VolumeDiscountDetails:
    """Cart totals recomputed after a volume discount (VDDetails).

    Attributes:
        sub_total: Plain subtotal before the volume discount
        sub_total_volume: Subtotal after the volume discount
        volume_discount_applied: sub_total - sub_total_volume
        totals: Full aggregate over the volume-discounted lines
    """

    sub_total: Decimal = Decimal("0")
    sub_total_volume: Decimal = Decimal("0")
    volume_discount_applied: Decimal = Decimal("0")
    totals: CartAggregate = field(default_factory=CartAggregate)

    def to_dict(self) -> Dict[str, Any]:
        data = self.totals.to_dict()
        data.update({
            'subTotal': self.sub_total,
            'subTotalVolume': self.sub_total_volume,
            'volumeDiscountApplied': self.volume_discount_applied,
        })
        return data


@dataclass(frozen=True)
class PlainAggregate:
    """Aggregate with no volume discount applied."""

    totals: CartAggregate

    @property
    def is_volume_overridden(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        data = self.totals.to_dict()
        data['volumeDiscountOverride'] = False
        return data


@dataclass(frozen=True)
class VolumeOverridden:
    """Aggregate whose totals come entirely from the volume discount pass.

    `totals` is the override; `plain` is kept for display of the saving only
    and must not be mixed into figures read from `totals`.
    """

    totals: CartAggregate
    plain: CartAggregate
    details: VolumeDiscountDetails

    @property
    def is_volume_overridden(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = self.totals.to_dict()
        data['volumeDiscountOverride'] = True
        data['VDDetails'] = self.details.to_dict()
        return data


Aggregate = Union[PlainAggregate, VolumeOverridden]


@dataclass
class CartResult:
    """Public result of a cart pricing run."""

    cart_value: Aggregate
    processed_items: List[LineItem] = field(default_factory=list)

    @property
    def totals(self) -> CartAggregate:
        """The totals every downstream consumer should read."""
        return self.cart_value.totals

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cartValue': self.cart_value.to_dict(),
            'processedItems': [item.to_dict() for item in self.processed_items],
        }

