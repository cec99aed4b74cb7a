"""Unit tests for discount tier resolution."""

from decimal import Decimal

import pytest

from pricing_engine.models.discount_tier import DiscountTier
from pricing_engine.pipeline.discount_resolver import (
    effective_quantity,
    resolve_suitable_discount,
)


def _tier(value, low, high, **kwargs):
    return DiscountTier(Decimal(value), Decimal(low), Decimal(high), **kwargs)


@pytest.fixture
def tiers():
    return [
        _tier("5", "1", "10"),
        _tier("10", "11", "50"),
        _tier("15", "51", "100"),
    ]


class TestTierBoundaries:
    """Tier bounds are inclusive at both ends."""

    @pytest.mark.parametrize(
        "quantity,expected",
        [
            (1, Decimal("5")),
            (10, Decimal("5")),
            (11, Decimal("10")),
            (50, Decimal("10")),
            (51, Decimal("15")),
            (100, Decimal("15")),
        ],
    )
    def test_boundary_quantities(self, tiers, quantity, expected):
        result = resolve_suitable_discount(quantity, tiers)
        assert result.suitable_discount.value == expected

    def test_quantity_above_every_tier(self, tiers):
        result = resolve_suitable_discount(101, tiers)
        assert result.suitable_discount is None
        assert result.next_suitable_discount is None

    def test_quantity_between_tiers(self):
        gapped = [_tier("5", "1", "10"), _tier("10", "20", "30")]
        result = resolve_suitable_discount(15, gapped)
        assert result.suitable_discount is None
        assert result.next_suitable_discount.value == Decimal("10")


class TestNoDiscount:
    """No applicable tier means no discount, never an error."""

    def test_empty_tiers(self):
        assert resolve_suitable_discount(5, []).suitable_discount is None

    def test_none_tiers(self):
        assert resolve_suitable_discount(5, None).suitable_discount is None

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity(self, tiers, quantity):
        assert resolve_suitable_discount(quantity, tiers).suitable_discount is None

    def test_non_numeric_quantity(self, tiers):
        assert resolve_suitable_discount("many", tiers).suitable_discount is None


class TestOrdering:
    """Overlapping tiers resolve to the first match in list order."""

    def test_first_match_wins(self):
        overlapping = [_tier("5", "1", "20"), _tier("10", "10", "30")]
        result = resolve_suitable_discount(15, overlapping)
        assert result.suitable_discount.value == Decimal("5")

    def test_first_match_wins_reversed(self):
        overlapping = [_tier("10", "10", "30"), _tier("5", "1", "20")]
        result = resolve_suitable_discount(15, overlapping)
        assert result.suitable_discount.value == Decimal("10")

    def test_next_tier_is_nearest_above(self, tiers):
        result = resolve_suitable_discount(10, list(reversed(tiers)))
        assert result.next_suitable_discount.min_quantity == Decimal("11")

    def test_resolved_tier_is_the_input_tier(self, tiers):
        """Resolution returns the tier itself; tiers are frozen."""
        result = resolve_suitable_discount(20, tiers)
        assert result.suitable_discount is tiers[1]
        with pytest.raises(AttributeError):
            result.suitable_discount.value = Decimal("99")


class TestPackagingQuantity:
    """Quantity and tier bounds are compared in the same unit."""

    def test_units_ignore_packaging(self, tiers):
        result = resolve_suitable_discount(24, tiers, packaging_quantity=6)
        assert result.suitable_discount.value == Decimal("10")

    def test_packs_divide_by_packaging(self):
        pack_tiers = [_tier("5", "1", "4"), _tier("10", "5", "10")]
        result = resolve_suitable_discount(24, pack_tiers, packaging_quantity=6, tier_unit="packs")
        assert result.suitable_discount.value == Decimal("5")

    def test_zero_packaging_treated_as_one(self):
        assert effective_quantity(Decimal("12"), 0, "packs") == Decimal("12")

    def test_invalid_tier_unit(self):
        with pytest.raises(ValueError):
            effective_quantity(Decimal("12"), 1, "boxes")


class TestDiscountTierModel:
    """DiscountTier construction and source key families."""

    def test_inverted_bounds_never_match(self):
        inverted = _tier("5", "10", "1")
        assert not inverted.contains(Decimal("5"))
        assert resolve_suitable_discount(5, [inverted]).suitable_discount is None

    def test_from_dict_missing_max_is_open_ended(self):
        tier = DiscountTier.from_dict({"Value": 10, "min_qty": 10})
        assert tier.max_quantity is None
        assert tier.contains(Decimal("10"))
        assert tier.contains(Decimal("100000"))
        assert not tier.contains(Decimal("9"))
        assert tier.to_dict()["maxQuantity"] is None

    def test_from_dict_price_list_keys(self):
        tier = DiscountTier.from_dict({
            "Value": 7.5,
            "min_qty": 10,
            "max_qty": 20,
            "CantCombineWithOtherDisCounts": True,
        })
        assert tier.value == Decimal("7.5")
        assert tier.min_quantity == Decimal("10")
        assert tier.max_quantity == Decimal("20")
        assert tier.cant_combine is True

    def test_from_dict_camel_case_keys(self):
        tier = DiscountTier.from_dict({"value": "3", "minQuantity": 1, "maxQuantity": 9})
        assert tier.contains(Decimal("9"))
        assert tier.cant_combine is False


class TestOpenEndedTier:
    """A catalog tier without max_qty covers every quantity from its minimum."""

    @pytest.fixture
    def catalog_tiers(self):
        return [
            DiscountTier.from_dict({"Value": 5, "min_qty": 1, "max_qty": 9}),
            DiscountTier.from_dict({"Value": 10, "min_qty": 10}),
        ]

    def test_bounded_tier_still_resolves(self, catalog_tiers):
        result = resolve_suitable_discount(5, catalog_tiers)
        assert result.suitable_discount.value == Decimal("5")
        assert result.next_suitable_discount.value == Decimal("10")

    def test_open_ended_tier_resolves(self, catalog_tiers):
        result = resolve_suitable_discount(250, catalog_tiers)
        assert result.suitable_discount.value == Decimal("10")
        assert result.next_suitable_discount is None
