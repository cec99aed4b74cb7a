"""Consistency checks for a priced cart with status assignment."""

from decimal import Decimal
from typing import List

from ..models.cart_aggregate import CartAggregate, CartResult
from ..models.line_item import LineItem
from ..models.validation_result import CartValidationResult

_ZERO = Decimal("0")


def _label(item: LineItem) -> str:
    return f"Line {item.item_no if item.item_no is not None else item.product_id}"


def _has_compound(item: LineItem) -> bool:
    return any(b.compound for b in item.inter_tax_breakup + item.intra_tax_breakup)


def validate_line_items(items: List[LineItem]) -> tuple:
    """Check each processed line.

    Returns:
        Tuple of (errors, warnings)
        - errors: total_tax differs from the sum of the line's tax values
        - warnings: negative total_price; prod_tax differs from total_tax on
          a line with no compound component (rounding drift)
    """
    errors = []
    warnings = []

    for item in items:
        values_sum = sum(item.tax_values.values(), _ZERO)
        if item.total_tax != values_sum:
            errors.append(
                f"{_label(item)}: total tax {item.total_tax} != sum of component values {values_sum}"
            )
        if item.total_price < 0:
            warnings.append(f"{_label(item)}: negative total price {item.total_price}")
        if item.prod_tax != item.total_tax and not _has_compound(item):
            warnings.append(
                f"{_label(item)}: product tax {item.prod_tax} differs from total tax {item.total_tax}"
            )

    return errors, warnings


def validate_totals(totals: CartAggregate) -> List[str]:
    """Errors for cart totals whose tax does not match the component totals.

    A cart-wide shipping tax is not part of any component total and is
    added to the expected sum.
    """
    expected = sum(totals.tax_totals.values(), _ZERO) + totals.shipping_tax
    if totals.total_tax != expected:
        return [
            f"Cart total tax {totals.total_tax} != sum of component totals "
            f"and shipping tax {expected}"
        ]
    return []


def validate_cart(result: CartResult) -> CartValidationResult:
    """Validate a priced cart and assign status (OK/REVIEW).

    Status assignment logic:
    - Any line whose total_tax is not the sum of its tax values → REVIEW
    - Cart total_tax not the sum of the component totals (plus any
      cart-wide shipping tax) → REVIEW
    - Otherwise OK; warnings never change the status
    """
    errors, warnings = validate_line_items(result.processed_items)
    errors.extend(validate_totals(result.totals))

    status = "REVIEW" if errors else "OK"
    return CartValidationResult(status=status, errors=errors, warnings=warnings)


def validation_passed(result: CartValidationResult) -> bool:
    """Return True when the cart passed every consistency check."""
    if result is None:
        return False
    return result.passed
