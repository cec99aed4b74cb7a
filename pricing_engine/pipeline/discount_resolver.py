"""Quantity-tiered discount resolution."""

import logging
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence

from ..models.discount_tier import DiscountResolution, DiscountTier
from .number_normalizer import to_decimal, to_decimal_or_default

logger = logging.getLogger(__name__)

TIER_UNITS = ("units", "packs")


def effective_quantity(
    quantity: Decimal,
    packaging_quantity: Optional[Any] = 1,
    tier_unit: str = "units"
) -> Decimal:
    """Express quantity in the unit the tiers were authored in.

    Args:
        quantity: Ordered quantity in units
        packaging_quantity: Units per pack (0 or None is treated as 1)
        tier_unit: "units" if tier bounds count units, "packs" if they
            count packs

    Returns:
        Quantity comparable with tier bounds

    Raises:
        ValueError: If tier_unit is not "units" or "packs"
    """
    if tier_unit not in TIER_UNITS:
        raise ValueError(f"Invalid tier_unit: {tier_unit} (must be 'units' or 'packs')")
    if tier_unit == "units":
        return quantity
    packaging = to_decimal_or_default(packaging_quantity, Decimal("1"))
    if packaging <= 0:
        packaging = Decimal("1")
    return quantity / packaging


def _next_tier(quantity: Decimal, tiers: Iterable[DiscountTier]) -> Optional[DiscountTier]:
    above = [t for t in tiers if t.min_quantity > quantity]
    if not above:
        return None
    # min() keeps the first of equal minimums, matching a stable sort
    return min(above, key=lambda t: t.min_quantity)


def resolve_suitable_discount(
    quantity: Any,
    tiers: Optional[Sequence[DiscountTier]],
    packaging_quantity: Optional[Any] = 1,
    tier_unit: str = "units"
) -> DiscountResolution:
    """Select the discount tier for a quantity.

    Tiers are scanned in list order and the first tier whose inclusive
    range contains the effective quantity wins, also when later tiers
    overlap it.

    Args:
        quantity: Ordered quantity (Decimal, int, float or numeric string)
        tiers: Product's discount tiers, in authored order
        packaging_quantity: Units per pack
        tier_unit: Unit the tier bounds are expressed in ("units"/"packs")

    Returns:
        DiscountResolution; suitable_discount is None when no tier applies
        (empty tiers, quantity outside every range, quantity <= 0 or not a
        number). next_suitable_discount is the tier with the smallest
        min_quantity above the quantity.
    """
    if not tiers:
        return DiscountResolution()

    try:
        qty = to_decimal(quantity)
    except ValueError:
        logger.warning(f"Non-numeric quantity {quantity!r}, no discount tier applies")
        return DiscountResolution()

    if qty <= 0:
        return DiscountResolution()

    qty = effective_quantity(qty, packaging_quantity, tier_unit)
    suitable = next((tier for tier in tiers if tier.contains(qty)), None)
    next_suitable = _next_tier(qty, tiers)

    logger.debug(
        f"Tier resolution: quantity={qty} ({tier_unit}) -> "
        f"{suitable.value if suitable else 'none'}%"
    )
    return DiscountResolution(suitable_discount=suitable, next_suitable_discount=next_suitable)
