"""LineItem data model representing one product line in a cart, quote or order."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..pipeline.number_normalizer import optional_decimal, to_decimal_or_default
from .discount_tier import DiscountTier
from .tax import HsnDetails, TaxBreakup

_VALUE_SUFFIX = "Value"

# camelCase keys this model reads; everything ending in "Value" that is not
# listed here is treated as a per-component tax value.
_KNOWN_KEYS = {
    'productId', 'itemNo', 'quantity', 'askedQuantity', 'packagingQuantity',
    'packagingQty', 'minOrderQuantity', 'unitListPrice', 'unitPrice',
    'totalPrice', 'pfRate', 'pfItemValue', 'discount', 'discountPercentage',
    'discountDetails', 'nextSuitableDiscount', 'discountsList', 'discountTiers',
    'cashdiscountValue', 'originalUnitPrice', 'shippingCharges', 'taxInclusive',
    'hsnDetails', 'tax', 'totalTax',
    'prodTax', 'interTaxBreakup', 'intraTaxBreakup', 'totalLP', 'checkMOQ',
    'cashDiscountedPrice', 'basicDiscountedPrice', 'volumeDiscount',
    'appliedDiscount', 'volumeDiscountApplied',
}


@dataclass
class LineItem:
    """One product line.

    Quantity, price and discount fields are inputs; tax fields and the
    derived price fields are written by the engine on returned copies.
    Per-component tax values live in `tax_values` keyed by component name
    and serialize as "<Name>Value".

    Attributes:
        product_id: Product identifier (required)
        item_no: Line sequence number, None for unsaved lines
        quantity: Current quantity
        asked_quantity: Originally requested quantity (reorder/clone)
        packaging_quantity: Units per pack (default 1)
        min_order_quantity: Minimum order quantity
        unit_list_price: Catalog price per unit
        unit_price: Price per unit after discount
        total_price: unit_price x quantity, the taxable base before pf_rate
        pf_rate: Packing/forwarding charge, an absolute amount
        pf_item_value: Packing/forwarding percentage of total_price, from
            which pf_rate is derived when set
        discount: Discount percentage
        discount_percentage: Resolved discount percentage
        discount_details: Selected discount tier
        next_suitable_discount: Next tier reachable by raising quantity
        discount_tiers: The product's discount tiers
        cash_discount_value: Cash discount percentage on unit_price
        original_unit_price: unit_price before the cash discount, kept so
            repricing does not apply the cash discount twice
        shipping_charges: Shipping charge per unit
        tax_inclusive: True if the list price already includes the selected
            jurisdiction's tax
        hsn_details: Catalog tax classification
        tax: Total tax percentage of the selected jurisdiction
        total_tax: Sum of tax_values
        prod_tax: (total_price + pf_rate) x tax / 100, non-compounded
        tax_values: Computed amount per tax component
        inter_tax_breakup: Components applied for inter-jurisdiction sales
        intra_tax_breakup: Components applied for intra-jurisdiction sales
        shipping_tax_values: Tax on this line's shipping per component, set
            when shipping is taxed item by item
    """

    product_id: Union[str, int]
    item_no: Optional[Union[str, int]] = None
    quantity: Decimal = Decimal("0")
    asked_quantity: Optional[Decimal] = None
    packaging_quantity: Decimal = Decimal("1")
    min_order_quantity: Optional[Decimal] = None
    unit_list_price: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    pf_rate: Optional[Decimal] = None
    pf_item_value: Optional[Decimal] = None
    discount: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")
    discount_details: Optional[DiscountTier] = None
    next_suitable_discount: Optional[DiscountTier] = None
    discount_tiers: List[DiscountTier] = field(default_factory=list)
    cash_discount_value: Decimal = Decimal("0")
    original_unit_price: Optional[Decimal] = None
    shipping_charges: Decimal = Decimal("0")
    tax_inclusive: bool = False
    hsn_details: Optional[HsnDetails] = None

    # Computed
    tax: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    prod_tax: Decimal = Decimal("0")
    tax_values: Dict[str, Decimal] = field(default_factory=dict)
    inter_tax_breakup: List[TaxBreakup] = field(default_factory=list)
    intra_tax_breakup: List[TaxBreakup] = field(default_factory=list)
    shipping_tax_values: Dict[str, Decimal] = field(default_factory=dict)
    total_lp: Decimal = Decimal("0")
    check_moq: bool = False
    cash_discounted_price: Decimal = Decimal("0")
    basic_discounted_price: Decimal = Decimal("0")
    volume_discount: Decimal = Decimal("0")
    applied_discount: Optional[Decimal] = None
    volume_discount_applied: bool = False

    def __post_init__(self):
        """Validate that LineItem has an identity."""
        if self.product_id is None or self.product_id == "":
            raise ValueError("LineItem must have a product_id")

    def copy(self, **changes) -> 'LineItem':
        """Return a copy with its own containers, optionally with changes.

        The tier and tax models are frozen and shared; the mutable lists and
        the tax_values mapping are copied so edits never reach the original.
        """
        item = replace(
            self,
            tax_values=dict(self.tax_values),
            shipping_tax_values=dict(self.shipping_tax_values),
            inter_tax_breakup=list(self.inter_tax_breakup),
            intra_tax_breakup=list(self.intra_tax_breakup),
            discount_tiers=list(self.discount_tiers),
        )
        for name, value in changes.items():
            setattr(item, name, value)
        return item

    @property
    def effective_asked_quantity(self) -> Decimal:
        return self.asked_quantity if self.asked_quantity is not None else self.quantity

    @property
    def shipping_tax(self) -> Decimal:
        return sum(self.shipping_tax_values.values(), Decimal("0"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        """Create from a camelCase cart line as supplied by cart collaborators."""
        tiers = data.get('discountTiers')
        if tiers is None:
            tiers = data.get('discountsList') or []
        packaging = data.get('packagingQuantity')
        if packaging is None:
            packaging = data.get('packagingQty')
        details = data.get('discountDetails')
        next_tier = data.get('nextSuitableDiscount')

        tax_values = {
            key[:-len(_VALUE_SUFFIX)]: to_decimal_or_default(value)
            for key, value in data.items()
            if key.endswith(_VALUE_SUFFIX) and key not in _KNOWN_KEYS
            and len(key) > len(_VALUE_SUFFIX)
        }

        return cls(
            product_id=data.get('productId'),
            item_no=data.get('itemNo'),
            quantity=to_decimal_or_default(data.get('quantity')),
            asked_quantity=optional_decimal(data.get('askedQuantity')),
            packaging_quantity=to_decimal_or_default(packaging, Decimal("1")),
            min_order_quantity=optional_decimal(data.get('minOrderQuantity')),
            unit_list_price=to_decimal_or_default(data.get('unitListPrice')),
            unit_price=to_decimal_or_default(data.get('unitPrice')),
            total_price=to_decimal_or_default(data.get('totalPrice')),
            pf_rate=optional_decimal(data.get('pfRate')),
            pf_item_value=optional_decimal(data.get('pfItemValue')),
            discount=to_decimal_or_default(data.get('discount')),
            discount_percentage=to_decimal_or_default(data.get('discountPercentage')),
            discount_details=DiscountTier.from_dict(details) if details else None,
            next_suitable_discount=DiscountTier.from_dict(next_tier) if next_tier else None,
            discount_tiers=[DiscountTier.from_dict(t) for t in tiers],
            cash_discount_value=to_decimal_or_default(data.get('cashdiscountValue')),
            original_unit_price=optional_decimal(data.get('originalUnitPrice')),
            shipping_charges=to_decimal_or_default(data.get('shippingCharges')),
            tax_inclusive=bool(data.get('taxInclusive', False)),
            hsn_details=HsnDetails.from_dict(data.get('hsnDetails')),
            tax=to_decimal_or_default(data.get('tax')),
            total_tax=to_decimal_or_default(data.get('totalTax')),
            prod_tax=to_decimal_or_default(data.get('prodTax')),
            tax_values=tax_values,
            inter_tax_breakup=[TaxBreakup.from_dict(b) for b in data.get('interTaxBreakup') or []],
            intra_tax_breakup=[TaxBreakup.from_dict(b) for b in data.get('intraTaxBreakup') or []],
            volume_discount_applied=bool(data.get('volumeDiscountApplied', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape read by order/quote builders."""
        data: Dict[str, Any] = {
            'productId': self.product_id,
            'itemNo': self.item_no,
            'quantity': self.quantity,
            'askedQuantity': self.asked_quantity,
            'packagingQuantity': self.packaging_quantity,
            'minOrderQuantity': self.min_order_quantity,
            'unitListPrice': self.unit_list_price,
            'unitPrice': self.unit_price,
            'originalUnitPrice': self.original_unit_price,
            'totalPrice': self.total_price,
            'pfRate': self.pf_rate,
            'pfItemValue': self.pf_item_value,
            'cashdiscountValue': self.cash_discount_value,
            'shippingCharges': self.shipping_charges,
            'taxInclusive': self.tax_inclusive,
            'discount': self.discount,
            'discountPercentage': self.discount_percentage,
            'discountDetails': self.discount_details.to_dict() if self.discount_details else None,
            'nextSuitableDiscount': (
                self.next_suitable_discount.to_dict() if self.next_suitable_discount else None
            ),
            'tax': self.tax,
            'totalTax': self.total_tax,
            'prodTax': self.prod_tax,
            'interTaxBreakup': [b.to_dict() for b in self.inter_tax_breakup],
            'intraTaxBreakup': [b.to_dict() for b in self.intra_tax_breakup],
            'shippingTax': self.shipping_tax,
            'shippingTaxBreakup': dict(self.shipping_tax_values),
            'totalLP': self.total_lp,
            'checkMOQ': self.check_moq,
            'cashDiscountedPrice': self.cash_discounted_price,
            'basicDiscountedPrice': self.basic_discounted_price,
            'volumeDiscount': self.volume_discount,
            'appliedDiscount': self.applied_discount,
            'volumeDiscountApplied': self.volume_discount_applied,
        }
        if self.hsn_details is not None:
            data['hsnDetails'] = self.hsn_details.to_dict()
        for name, value in self.tax_values.items():
            data[f"{name}{_VALUE_SUFFIX}"] = value
        return data
