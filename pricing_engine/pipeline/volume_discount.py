"""Cart-level volume discount recomputation (the VDDetails override)."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from ..models.cart_aggregate import VolumeDiscountDetails, VolumeDiscountEntry
from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from .cart_fold import fold_line_items
from .line_pricing import discounted_price
from .shipping_tax import apply_item_shipping_tax
from .tax_calculator import calculate_item_taxes

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass
class VolumeDiscountResult:
    """Lines after the volume discount and the override totals."""

    items: List[LineItem] = field(default_factory=list)
    details: VolumeDiscountDetails = field(default_factory=VolumeDiscountDetails)


def find_volume_entry(
    entries: Sequence[VolumeDiscountEntry],
    item_no: Optional[Union[str, int]]
) -> Optional[VolumeDiscountEntry]:
    """Entry for item_no, or None. Unsaved lines (no item_no) never match."""
    if item_no is None:
        return None
    return next((entry for entry in entries if entry.item_no == item_no), None)


def _can_combine(item: LineItem, entry: VolumeDiscountEntry) -> bool:
    if entry.disc_changed:
        return True
    return not (item.discount_details and item.discount_details.cant_combine)


def apply_volume_discount(
    item: LineItem,
    entry: VolumeDiscountEntry,
    context: PricingContext
) -> LineItem:
    """Reprice one line with its volume discount and recalculate its tax.

    The volume percentage stacks on the line's own discount unless the
    line's tier can't be combined (a hand-changed discount always may).
    Prices are taken from the list price over the asked quantity.
    """
    volume = entry.volume_discount if entry.volume_discount > 0 and _can_combine(item, entry) else _ZERO
    applied = volume + item.discount

    updated = item.copy(volume_discount=volume, applied_discount=applied)
    updated.unit_price = discounted_price(updated.unit_list_price, applied, context)
    updated.original_unit_price = None
    updated.total_price = context.round(updated.effective_asked_quantity * updated.unit_price)
    if updated.pf_item_value is not None:
        updated.pf_rate = context.round(updated.total_price * updated.pf_item_value / _HUNDRED)
    updated.volume_discount_applied = volume > 0
    updated.total_lp = updated.unit_list_price * updated.quantity
    if updated.unit_list_price > updated.unit_price:
        updated.basic_discounted_price = context.round(
            (updated.unit_list_price - updated.unit_price) * updated.quantity
        )
    else:
        updated.basic_discounted_price = _ZERO
    updated.cash_discounted_price = _ZERO

    taxed = calculate_item_taxes(updated, context).updated_item
    return apply_item_shipping_tax(taxed, context)


def calculate_volume_discount(
    items: Sequence[LineItem],
    entries: Sequence[VolumeDiscountEntry],
    context: PricingContext,
    insurance_charges=0
) -> VolumeDiscountResult:
    """Recompute cart totals with cart-level volume discounts applied.

    Args:
        items: Lines already priced and taxed by the plain pass
        entries: Volume discount per item_no
        context: Pricing context
        insurance_charges: Insurance added to the grand total

    Returns:
        VolumeDiscountResult. Lines without an entry, or without a list
        price to discount from, keep their plain figures. details.totals is
        a full fold over the resulting lines.
    """
    sub_total = sum((item.total_price for item in items), _ZERO)
    repriced: List[LineItem] = []

    for item in items:
        entry = find_volume_entry(entries, item.item_no)
        if entry is None or item.unit_list_price <= 0:
            repriced.append(item.copy())
            continue
        repriced.append(apply_volume_discount(item, entry, context))

    totals = fold_line_items(repriced, context, insurance_charges)
    details = VolumeDiscountDetails(
        sub_total=sub_total,
        sub_total_volume=totals.total_value,
        volume_discount_applied=sub_total - totals.total_value,
        totals=totals,
    )
    logger.debug(
        f"Volume discount: subtotal {sub_total} -> {totals.total_value}, "
        f"grand total {totals.grand_total}"
    )
    return VolumeDiscountResult(items=repriced, details=details)
