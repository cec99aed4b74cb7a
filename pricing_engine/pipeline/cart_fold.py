"""Full fold of priced and taxed line items into cart totals."""

from decimal import Decimal
from typing import Dict, Sequence

from ..models.cart_aggregate import CartAggregate
from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from .number_normalizer import to_decimal_or_default
from .shipping_tax import calculate_cart_shipping_tax
from .tax_resolver import collect_cart_tax_breakup

_ZERO = Decimal("0")


def fold_line_items(
    items: Sequence[LineItem],
    context: PricingContext,
    insurance_charges=0
) -> CartAggregate:
    """Sum every line into a fresh CartAggregate.

    There is no incremental path: totals are always rebuilt from all lines.
    Every component name of the selected jurisdiction gets a total, lines
    without that component contribute 0.

    grand_total is the calculated total, or with context.rounding_adjustment
    the calculated total rounded to a whole unit; rounding_adjustment holds
    grand_total - calculated_total.

    Shipping tax: per-line shipping tax values add into the component totals;
    a cart-wide shipping tax is kept apart in shipping_tax. Both count
    towards total_tax. When shipping is charged before tax it also counts
    towards taxable_amount.
    """
    tax_totals: Dict[str, Decimal] = {
        component.tax_name: _ZERO
        for component in collect_cart_tax_breakup(items, context.is_inter)
    }
    totals = CartAggregate(total_items=len(items))

    for item in items:
        for name, value in item.tax_values.items():
            tax_totals[name] = tax_totals.get(name, _ZERO) + value
        for name, value in item.shipping_tax_values.items():
            tax_totals[name] = tax_totals.get(name, _ZERO) + value
        totals.total_value += item.total_price
        totals.total_tax += item.total_tax + item.shipping_tax
        totals.pf_rate += item.pf_rate if item.pf_rate is not None else _ZERO
        totals.total_shipping += item.shipping_charges * item.quantity
        totals.total_lp += item.total_lp
        totals.total_cash_discount += item.cash_discounted_price
        totals.total_basic_discount += item.basic_discounted_price

    totals.tax_totals = tax_totals
    totals.shipping_tax = calculate_cart_shipping_tax(items, totals.total_shipping, context)
    totals.total_tax += totals.shipping_tax
    totals.taxable_amount = totals.total_value + totals.pf_rate
    if context.is_before_tax:
        totals.taxable_amount += totals.total_shipping
    totals.insurance_charges = context.round(to_decimal_or_default(insurance_charges))
    totals.calculated_total = (
        totals.total_value
        + totals.total_tax
        + totals.total_shipping
        + totals.pf_rate
        + totals.insurance_charges
    )
    if context.rounding_adjustment:
        totals.grand_total = context.rounder(totals.calculated_total, 0)
    else:
        totals.grand_total = totals.calculated_total
    totals.rounding_adjustment = totals.grand_total - totals.calculated_total
    totals.has_products_with_negative_total_price = any(item.total_price < 0 for item in items)
    return totals
