"""Selection of the tax components that apply to a line item."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from ..models.line_item import LineItem
from ..models.tax import TaxComponent, TaxRuleSet


@dataclass(frozen=True)
class TaxSelection:
    """Tax components selected for one jurisdiction.

    Attributes:
        total_tax_percentage: Rule set's total percentage (display and
            cross-check only)
        components: Components in application order
    """

    total_tax_percentage: Decimal = Decimal("0")
    components: List[TaxComponent] = field(default_factory=list)


def _rule_set(item: LineItem, is_inter: bool) -> Optional[TaxRuleSet]:
    hsn = item.hsn_details
    if hsn is None:
        return None
    return hsn.inter_tax if is_inter else hsn.intra_tax


def select_tax_components(item: LineItem, is_inter: bool) -> TaxSelection:
    """Select the ordered tax components for a line item.

    Reads the inter rule set when is_inter is True, otherwise the intra rule
    set. A missing side or an empty component list yields a zero selection.
    Component order is preserved exactly since compounding depends on it.
    """
    rules = _rule_set(item, is_inter)
    if rules is None or not rules.components:
        return TaxSelection()
    return TaxSelection(
        total_tax_percentage=rules.total_tax,
        components=list(rules.components),
    )


def collect_cart_tax_breakup(items: Iterable[LineItem], is_inter: bool) -> List[TaxComponent]:
    """Distinct tax components across a cart, for cart-level totals.

    Non-compound components come first in first-seen order, followed by the
    compound ones, each name listed once with its first-seen rate.
    """
    plain: Dict[str, TaxComponent] = {}
    compound: Dict[str, TaxComponent] = {}
    for item in items:
        rules = _rule_set(item, is_inter)
        if rules is None:
            continue
        for component in rules.components:
            target = compound if component.compound else plain
            if component.tax_name not in plain and component.tax_name not in compound:
                target[component.tax_name] = component
    return list(plain.values()) + list(compound.values())
