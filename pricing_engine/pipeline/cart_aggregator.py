"""Cart aggregation: price, tax and fold every line, then apply volume discounts."""

import logging
from typing import List, Optional, Sequence

from ..models.cart_aggregate import (
    CartResult,
    PlainAggregate,
    VolumeDiscountEntry,
    VolumeOverridden,
)
from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from .cart_fold import fold_line_items
from .line_pricing import price_line_item
from .shipping_tax import apply_item_shipping_tax
from .tax_calculator import calculate_item_taxes
from .volume_discount import calculate_volume_discount

logger = logging.getLogger(__name__)


class CartInputError(TypeError):
    """Raised when the cart is not a sequence of LineItem."""


def _check_items(items) -> None:
    if not isinstance(items, (list, tuple)):
        raise CartInputError(f"Cart items must be a list of LineItem, got {type(items).__name__}")
    for index, item in enumerate(items):
        if not isinstance(item, LineItem):
            raise CartInputError(
                f"Cart item {index} is {type(item).__name__}, expected LineItem"
            )


def aggregate_cart(
    items: Sequence[LineItem],
    context: PricingContext,
    volume_discounts: Optional[Sequence[VolumeDiscountEntry]] = None,
    insurance_charges=0
) -> CartResult:
    """Price and tax every line item and fold the results into cart totals.

    Each line is priced (cash discount, total_price, pf_rate, list totals)
    and then run through the tax calculator and, when shipping is taxed
    item by item, the shipping tax stage. Totals are a full fold over
    the processed lines; <Name>Total exists for every component observed in
    the cart even when it sums to 0.

    When volume_discounts is given, the lines are repriced with the volume
    percentages and the result is VolumeOverridden: its totals replace the
    plain totals wholesale. The plain figures stay on the variant for
    display only.

    Args:
        items: Cart lines (not mutated)
        context: Pricing context shared by every line
        volume_discounts: Cart-level volume discount entries, or None
        insurance_charges: Insurance added to the grand total

    Returns:
        CartResult with the aggregate variant and the processed lines

    Raises:
        CartInputError: If items is not a list/tuple of LineItem
    """
    _check_items(items)

    processed: List[LineItem] = []
    for item in items:
        priced = price_line_item(item, context)
        taxed = calculate_item_taxes(priced, context).updated_item
        processed.append(apply_item_shipping_tax(taxed, context))

    plain = fold_line_items(processed, context, insurance_charges)
    logger.debug(
        f"Cart folded: {plain.total_items} items, total value {plain.total_value}, "
        f"total tax {plain.total_tax}, grand total {plain.grand_total}"
    )

    if volume_discounts is None:
        return CartResult(cart_value=PlainAggregate(plain), processed_items=processed)

    volume = calculate_volume_discount(processed, volume_discounts, context, insurance_charges)
    logger.info(
        f"Volume discount override: grand total {plain.grand_total} -> "
        f"{volume.details.totals.grand_total}"
    )
    return CartResult(
        cart_value=VolumeOverridden(
            totals=volume.details.totals,
            plain=plain,
            details=volume.details,
        ),
        processed_items=volume.items,
    )
