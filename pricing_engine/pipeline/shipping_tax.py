"""Tax on shipping charges, per line or once for the whole cart."""

import logging
from decimal import Decimal
from typing import Sequence

from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from .tax_resolver import collect_cart_tax_breakup, select_tax_components

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def line_shipping(item: LineItem) -> Decimal:
    """Shipping charged on a line: per-unit charge x asked quantity."""
    return item.shipping_charges * item.effective_asked_quantity


def apply_item_shipping_tax(item: LineItem, context: PricingContext) -> LineItem:
    """Tax a line's shipping with the line's own components.

    Only active when shipping is charged before tax and taxed item by item;
    otherwise (and under exemption) shipping_tax_values is cleared. Components
    are applied in order like product tax: non-compound ones tax the line's
    shipping, compound ones the shipping tax computed so far.

    Returns:
        Updated copy of the line item
    """
    updated = item.copy(shipping_tax_values={})
    if context.tax_exemption or not (context.is_before_tax and context.item_wise_shipping_tax):
        return updated

    shipping = line_shipping(item)
    running = _ZERO
    for component in select_tax_components(item, context.is_inter).components:
        source = running if component.compound else shipping
        value = context.round(source * component.rate / _HUNDRED)
        values = updated.shipping_tax_values
        values[component.tax_name] = values.get(component.tax_name, _ZERO) + value
        running += value
    return updated


def calculate_cart_shipping_tax(
    items: Sequence[LineItem],
    total_shipping: Decimal,
    context: PricingContext
) -> Decimal:
    """Cart-wide shipping tax, charged once on the cart's total shipping.

    Applies when shipping is charged before tax and not taxed item by item.
    The rate is the first component of the cart's tax breakup (non-compound
    components come first); a cart without tax components pays none.
    """
    if context.tax_exemption or not context.is_before_tax or context.item_wise_shipping_tax:
        return _ZERO
    breakup = collect_cart_tax_breakup(items, context.is_inter)
    if not breakup:
        return _ZERO
    shipping_tax = context.round(total_shipping * breakup[0].rate / _HUNDRED)
    logger.debug(f"Cart shipping tax at {breakup[0].tax_name} {breakup[0].rate}%: {shipping_tax}")
    return shipping_tax
