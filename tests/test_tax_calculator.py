"""Unit tests for per-line tax calculation."""

from decimal import Decimal

import pytest

from pricing_engine.models.line_item import LineItem
from pricing_engine.models.pricing_context import PricingContext
from pricing_engine.models.tax import HsnDetails, TaxBreakup, TaxComponent, TaxRuleSet
from pricing_engine.pipeline.rounding import InvalidPrecisionError
from pricing_engine.pipeline.tax_calculator import calculate_item_taxes, taxable_base


def _rules(total, *components):
    return TaxRuleSet(Decimal(total), [TaxComponent(n, Decimal(r), c) for n, r, c in components])


GST_INTER = _rules("18", ("IGST", "18", False))
GST_INTRA = _rules("18", ("CGST", "9", False), ("SGST", "9", False))
GST_WITH_CESS = _rules("28", ("GST", "18", False), ("CESS", "10", True))


def _item(total_price="1000", pf_rate="50", inter=GST_INTER, intra=GST_INTRA, **kwargs):
    return LineItem(
        product_id="P1",
        total_price=Decimal(total_price),
        pf_rate=Decimal(pf_rate) if pf_rate is not None else None,
        hsn_details=HsnDetails(hsn_code="8471", inter_tax=inter, intra_tax=intra),
        **kwargs
    )


class TestNonCompound:
    """Non-compound components tax total_price + pf_rate."""

    def test_intra_split(self):
        result = calculate_item_taxes(_item(), PricingContext(is_inter=False))
        item = result.updated_item

        assert item.tax_values == {"CGST": Decimal("94.50"), "SGST": Decimal("94.50")}
        assert item.total_tax == Decimal("189.00")
        assert item.tax == Decimal("18")
        assert item.prod_tax == Decimal("189.00")

    def test_inter_single_component(self):
        item = calculate_item_taxes(_item(), PricingContext(is_inter=True)).updated_item

        assert item.tax_values == {"IGST": Decimal("189.00")}
        assert item.total_tax == Decimal("189.00")

    def test_cart_contribution_matches_values(self):
        result = calculate_item_taxes(_item(), PricingContext(is_inter=False))
        assert result.updated_cart_value == {"CGST": Decimal("94.50"), "SGST": Decimal("94.50")}

    def test_each_value_rounded_before_sum(self):
        item = _item(total_price="10.05", pf_rate=None, intra=_rules(
            "10", ("A", "5", False), ("B", "5", False)
        ))
        updated = calculate_item_taxes(item, PricingContext(is_inter=False)).updated_item
        # 0.5025 rounds to 0.50 per component
        assert updated.tax_values == {"A": Decimal("0.50"), "B": Decimal("0.50")}
        assert updated.total_tax == Decimal("1.00")
        assert updated.prod_tax == Decimal("1.01")


class TestCompound:
    """Compound components tax the running sum of earlier components."""

    def test_compound_taxes_running_total(self):
        item = _item(inter=GST_WITH_CESS)
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item

        assert updated.tax_values["GST"] == Decimal("189.00")
        assert updated.tax_values["CESS"] == Decimal("18.90")
        assert updated.total_tax == Decimal("207.90")

    def test_prod_tax_diverges_with_compound(self):
        item = _item(inter=GST_WITH_CESS)
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item

        assert updated.tax == Decimal("28")
        assert updated.prod_tax == Decimal("294.00")
        assert updated.prod_tax != updated.total_tax

    def test_order_changes_result(self):
        """A compound component listed first has nothing to compound on."""
        item = _item(inter=_rules("28", ("CESS", "10", True), ("GST", "18", False)))
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item

        assert updated.tax_values["CESS"] == Decimal("0.00")
        assert updated.total_tax == Decimal("189.00")

    def test_breakup_records_compound_flag(self):
        item = _item(inter=GST_WITH_CESS)
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item

        assert updated.inter_tax_breakup == [
            TaxBreakup("GST", Decimal("18"), False),
            TaxBreakup("CESS", Decimal("10"), True),
        ]


class TestSumInvariant:
    """total_tax always equals the sum of the computed component values."""

    @pytest.mark.parametrize("is_inter", [True, False])
    @pytest.mark.parametrize("total_price", ["0", "1", "999.99", "123456.78"])
    def test_total_tax_equals_sum(self, is_inter, total_price):
        item = _item(total_price=total_price, inter=GST_WITH_CESS)
        updated = calculate_item_taxes(item, PricingContext(is_inter=is_inter)).updated_item
        assert updated.total_tax == sum(updated.tax_values.values(), Decimal("0"))

    def test_stale_values_dropped(self):
        item = _item(tax_values={"VAT": Decimal("55")}, total_tax=Decimal("55"))
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item

        assert "VAT" not in updated.tax_values
        assert updated.total_tax == Decimal("189.00")


class TestJurisdictionBreakup:
    """Only the selected jurisdiction's breakup is rebuilt."""

    def test_selected_breakup_replaced_not_appended(self):
        stale = [TaxBreakup("OLD", Decimal("5"))]
        item = _item(inter_tax_breakup=list(stale))

        first = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item
        second = calculate_item_taxes(first, PricingContext(is_inter=True)).updated_item

        assert second.inter_tax_breakup == [TaxBreakup("IGST", Decimal("18"), False)]

    def test_other_breakup_left_untouched(self):
        previous = [TaxBreakup("IGST", Decimal("18"))]
        item = _item(inter_tax_breakup=list(previous))

        updated = calculate_item_taxes(item, PricingContext(is_inter=False)).updated_item

        assert updated.inter_tax_breakup == previous
        assert [b.tax_name for b in updated.intra_tax_breakup] == ["CGST", "SGST"]


class TestEdgeCases:
    """Missing data degrades to zero; invalid precision fails."""

    def test_missing_hsn_details(self):
        item = LineItem(product_id="P1", total_price=Decimal("1000"))
        updated = calculate_item_taxes(item, PricingContext()).updated_item

        assert updated.tax == Decimal("0")
        assert updated.total_tax == Decimal("0")
        assert updated.prod_tax == Decimal("0.00")
        assert updated.tax_values == {}

    def test_pf_rate_none_treated_as_zero(self):
        item = _item(pf_rate=None)
        assert taxable_base(item) == Decimal("1000")
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item
        assert updated.total_tax == Decimal("180.00")

    def test_zero_total_price_taxes_pf_rate(self):
        item = _item(total_price="0", pf_rate="50")
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item
        assert updated.total_tax == Decimal("9.00")

    def test_negative_base_not_clamped(self):
        item = _item(total_price="-100", pf_rate=None)
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item
        assert updated.total_tax == Decimal("-18.00")

    def test_negative_precision_fails(self):
        with pytest.raises(InvalidPrecisionError):
            calculate_item_taxes(_item(), PricingContext(precision=-1))

    def test_custom_rounder_failure_propagates(self):
        def rounder(value, precision):
            raise InvalidPrecisionError("bad precision")

        with pytest.raises(InvalidPrecisionError):
            calculate_item_taxes(_item(), PricingContext(rounder=rounder))

    def test_duplicate_component_names_accumulate(self):
        item = _item(inter=_rules("10", ("GST", "5", False), ("GST", "5", False)))
        updated = calculate_item_taxes(item, PricingContext(is_inter=True)).updated_item
        assert updated.tax_values == {"GST": Decimal("105.00")}
        assert updated.total_tax == Decimal("105.00")


class TestTaxExemption:
    """Exemption zeroes every tax output."""

    def test_exemption_zeroes_everything(self):
        item = _item(intra_tax_breakup=[TaxBreakup("CGST", Decimal("9"))])
        context = PricingContext(is_inter=False, tax_exemption=True)
        result = calculate_item_taxes(item, context)
        updated = result.updated_item

        assert updated.tax == Decimal("0")
        assert updated.total_tax == Decimal("0")
        assert updated.prod_tax == Decimal("0")
        assert updated.tax_values == {"CGST": Decimal("0"), "SGST": Decimal("0")}
        assert updated.intra_tax_breakup == []
        assert result.updated_cart_value == {"CGST": Decimal("0"), "SGST": Decimal("0")}


class TestPurity:
    """Same input, same output; the input is never mutated."""

    def test_idempotent(self):
        item = _item(inter=GST_WITH_CESS)
        context = PricingContext(is_inter=True)

        once = calculate_item_taxes(item, context).updated_item
        twice = calculate_item_taxes(once, context).updated_item

        assert twice == once

    def test_input_not_mutated(self):
        item = _item(inter_tax_breakup=[TaxBreakup("OLD", Decimal("1"))])
        snapshot = item.copy()

        calculate_item_taxes(item, PricingContext(is_inter=True))

        assert item == snapshot
        assert item.tax_values == {}
        assert item.inter_tax_breakup == [TaxBreakup("OLD", Decimal("1"))]

    def test_higher_precision(self):
        item = _item(total_price="10.0005", pf_rate=None)
        updated = calculate_item_taxes(item, PricingContext(is_inter=True, precision=4)).updated_item
        assert updated.total_tax == Decimal("1.8001")
