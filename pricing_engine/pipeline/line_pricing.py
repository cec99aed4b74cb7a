"""Line price derivation: tier discount, cash discount, packing and list totals."""

from decimal import Decimal

from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from .discount_resolver import resolve_suitable_discount
from .tax_resolver import select_tax_components

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def discounted_price(list_price: Decimal, percentage: Decimal, context: PricingContext) -> Decimal:
    """list_price less percentage, rounded at context precision."""
    return context.round(list_price - list_price * percentage / _HUNDRED)


def exclusive_price(price: Decimal, item: LineItem, context: PricingContext) -> Decimal:
    """Strip the line's tax percentage for the context's jurisdiction from price."""
    rate = select_tax_components(item, context.is_inter).total_tax_percentage
    return context.round(price / (1 + rate / _HUNDRED))


def apply_discount_details(
    item: LineItem,
    context: PricingContext,
    tier_unit: str = "units"
) -> LineItem:
    """Resolve the line's discount tier and derive its discounted price.

    Steps:
    1. Packaging quantity defaults to 1, minimum order quantity to the
       packaging quantity; check_moq flags lines below the minimum.
    2. When the line carries tiers, the tier for its quantity replaces
       discount_details wholesale (None when no tier applies, i.e. 0%).
       Lines without tiers keep their own discount percentage.
    3. Unless a volume discount owns the price, unit_price is the list price
       less the discount and total_price is unit_price x quantity. Lines
       without a list price keep the unit_price they came with.
    4. A tax-inclusive list price has the selected jurisdiction's total tax
       percentage taken back out of the discounted unit price.

    Args:
        item: Line item (not mutated)
        context: Pricing context (precision and rounding)
        tier_unit: "units" or "packs", the unit tier bounds are authored in

    Returns:
        Updated copy of the line item
    """
    updated = item.copy()

    if updated.packaging_quantity is None or updated.packaging_quantity <= 0:
        updated.packaging_quantity = Decimal("1")
    if updated.min_order_quantity is None:
        updated.min_order_quantity = updated.packaging_quantity
    updated.check_moq = updated.min_order_quantity > updated.effective_asked_quantity

    if updated.discount_tiers:
        resolution = resolve_suitable_discount(
            updated.quantity,
            updated.discount_tiers,
            updated.packaging_quantity,
            tier_unit,
        )
        updated.discount_details = resolution.suitable_discount
        updated.next_suitable_discount = resolution.next_suitable_discount
        percentage = resolution.suitable_discount.value if resolution.suitable_discount else _ZERO
    else:
        percentage = updated.discount

    updated.discount_percentage = percentage

    if updated.volume_discount_applied:
        return updated

    updated.discount = percentage
    if updated.unit_list_price > 0:
        updated.unit_price = discounted_price(updated.unit_list_price, percentage, context)
        updated.original_unit_price = None
        if updated.tax_inclusive:
            updated.unit_price = exclusive_price(updated.unit_price, updated, context)
    updated.total_price = context.round(updated.quantity * updated.unit_price)
    return updated


def price_line_item(item: LineItem, context: PricingContext) -> LineItem:
    """Derive the monetary fields the tax calculator and the fold depend on.

    - cash discount: percentage of the pre-cash-discount unit price, taken
      off unit_price (the pre-cash price is remembered, so pricing the same
      line again gives the same result)
    - total_price = quantity x unit_price, unless a volume discount owns it
    - pf_rate derived from pf_item_value when that percentage is set
    - total_lp, basic and cash discount amounts for the cart summary
    """
    updated = item.copy()

    if updated.cash_discount_value > 0:
        if updated.original_unit_price is None:
            updated.original_unit_price = updated.unit_price
        cash_amount = updated.original_unit_price * updated.cash_discount_value / _HUNDRED
        updated.unit_price = context.round(updated.original_unit_price - cash_amount)
        updated.cash_discounted_price = context.round(cash_amount * updated.quantity)
    else:
        updated.cash_discounted_price = _ZERO

    if not updated.volume_discount_applied:
        updated.total_price = context.round(updated.quantity * updated.unit_price)

    if updated.pf_item_value is not None:
        updated.pf_rate = context.round(updated.total_price * updated.pf_item_value / _HUNDRED)

    updated.total_lp = updated.unit_list_price * updated.quantity

    if updated.unit_list_price > updated.unit_price:
        updated.basic_discounted_price = context.round(
            (updated.unit_list_price - updated.unit_price) * updated.quantity
        )
    else:
        updated.basic_discounted_price = _ZERO

    return updated
