"""Per-line tax calculation with compound and non-compound components."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict

from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from ..models.tax import TaxBreakup
from .tax_resolver import select_tax_components

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass
class TaxCalculationResult:
    """Output of calculate_item_taxes.

    Attributes:
        updated_item: Copy of the input line with tax fields written
        updated_cart_value: This line's contribution per tax component name,
            folded into "<Name>Total" by the cart aggregator
    """

    updated_item: LineItem
    updated_cart_value: Dict[str, Decimal] = field(default_factory=dict)


def taxable_base(item: LineItem) -> Decimal:
    """total_price plus packing/forwarding; never clamped."""
    return item.total_price + (item.pf_rate if item.pf_rate is not None else _ZERO)


def calculate_item_taxes(item: LineItem, context: PricingContext) -> TaxCalculationResult:
    """Calculate tax for one line item.

    Components are applied in order. A non-compound component taxes the
    taxable base (total_price + pf_rate). A compound component taxes the sum
    of the component values computed so far in this pass, so moving it
    changes the result. Each value is rounded at context.precision before it
    is accumulated.

    prod_tax is base x total percentage, without compounding; it differs
    from total_tax whenever a compound component applies.

    Only the breakup for the selected jurisdiction is rebuilt; the other is
    left as stored. tax_values from earlier runs are dropped so total_tax
    always equals the sum of the values present.

    Args:
        item: Line item with total_price already set (not mutated)
        context: Jurisdiction, precision, exemption and rounding strategy

    Returns:
        TaxCalculationResult with the updated copy and the cart contribution

    Raises:
        InvalidPrecisionError: Propagated from the rounding strategy
    """
    selection = select_tax_components(item, context.is_inter)
    updated = item.copy(tax_values={})
    breakup_field = "inter_tax_breakup" if context.is_inter else "intra_tax_breakup"

    if context.tax_exemption:
        updated.tax = _ZERO
        updated.total_tax = _ZERO
        updated.prod_tax = _ZERO
        updated.tax_values = {c.tax_name: _ZERO for c in selection.components}
        setattr(updated, breakup_field, [])
        return TaxCalculationResult(updated, dict(updated.tax_values))

    base = taxable_base(item)
    running = _ZERO
    values: Dict[str, Decimal] = {}

    for component in selection.components:
        source = running if component.compound else base
        value = context.round(source * component.rate / _HUNDRED)
        values[component.tax_name] = values.get(component.tax_name, _ZERO) + value
        running += value

    updated.tax_values = values
    updated.total_tax = running
    updated.tax = selection.total_tax_percentage
    updated.prod_tax = context.round(base * updated.tax / _HUNDRED)
    setattr(updated, breakup_field, [TaxBreakup.from_component(c) for c in selection.components])

    return TaxCalculationResult(updated, dict(values))
