"""CLI interface for pricing a cart from a JSON file."""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import get_app_version
from ..config.profile_loader import resolve_profile
from ..models.cart_aggregate import VolumeDiscountEntry
from ..models.line_item import LineItem
from ..models.pricing_context import PricingContext
from ..pipeline.cart_aggregator import aggregate_cart
from ..pipeline.line_pricing import apply_discount_details
from ..pipeline.validation import validate_cart

logger = logging.getLogger(__name__)


class CartFileError(Exception):
    """Raised when a cart or volume discount file cannot be used."""
    pass


def _read_json(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise CartFileError(f"File not found: {path}")
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise CartFileError(f"Invalid JSON in {path}: {e}")


def load_cart(path: str) -> List[LineItem]:
    """Load cart lines from `{"items": [...]}` or a bare list of camelCase lines.

    Raises:
        CartFileError: If the file is missing, not JSON or has no item list
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get('items')
    if not isinstance(data, list):
        raise CartFileError(f"Cart file {path} must hold a list of items or an 'items' list")
    return [LineItem.from_dict(entry) for entry in data]


def load_volume_discounts(path: str) -> List[VolumeDiscountEntry]:
    """Load volume discount entries from a list or `{"volumeDiscounts": [...]}`."""
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get('volumeDiscounts')
    if not isinstance(data, list):
        raise CartFileError(
            f"Volume discount file {path} must hold a list or a 'volumeDiscounts' list"
        )
    return [VolumeDiscountEntry.from_dict(entry) for entry in data]


def json_default(value: Any) -> Any:
    """JSON encoder hook: Decimal amounts are written as exact strings ("94.50")."""
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def process_cart(
    items: List[LineItem],
    context: PricingContext,
    tier_unit: str = "units",
    volume_discounts: Optional[List[VolumeDiscountEntry]] = None,
    insurance_charges=0
) -> Dict[str, Any]:
    """Resolve discounts, price, tax and validate a cart.

    Returns:
        Dict with cartValue, processedItems and validation
    """
    discounted = [apply_discount_details(item, context, tier_unit) for item in items]
    result = aggregate_cart(
        discounted,
        context,
        volume_discounts=volume_discounts,
        insurance_charges=insurance_charges,
    )
    validation = validate_cart(result)
    if validation.status == "REVIEW":
        for error in validation.errors:
            logger.warning(error)

    output = result.to_dict()
    output['validation'] = validation.to_dict()
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pricing Engine - Compute discounts, taxes and totals for a cart",
        epilog="Amounts in the JSON output are decimal strings, e.g. \"1062.00\"."
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Cart JSON file ({\"items\": [...]} or a list of line items)"
    )

    jurisdiction = parser.add_mutually_exclusive_group()
    jurisdiction.add_argument(
        "--inter",
        dest="is_inter",
        action="store_const",
        const=True,
        help="Apply inter-jurisdiction tax components"
    )
    jurisdiction.add_argument(
        "--intra",
        dest="is_inter",
        action="store_const",
        const=False,
        help="Apply intra-jurisdiction tax components"
    )

    parser.add_argument(
        "--precision",
        type=int,
        help="Decimal places for every rounded amount (default: from profile)"
    )

    parser.add_argument(
        "--tax-exemption",
        action="store_true",
        help="Zero all taxes"
    )

    parser.add_argument(
        "--rounding-adjustment",
        action="store_true",
        help="Round the grand total to a whole unit"
    )

    parser.add_argument(
        "--shipping-before-tax",
        action="store_true",
        help="Charge shipping before tax, so it is taxed and counted as taxable"
    )

    parser.add_argument(
        "--item-wise-shipping-tax",
        action="store_true",
        help="Tax each line's shipping with that line's tax components"
    )

    parser.add_argument(
        "--profile",
        type=str,
        help="Configuration profile name (default: PRICING_PROFILE or 'default')"
    )

    parser.add_argument(
        "--volume-discounts",
        type=str,
        help="JSON file with cart-level volume discount entries"
    )

    parser.add_argument(
        "--insurance",
        type=str,
        default="0",
        help="Insurance charges added to the grand total"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with error code if the cart requires review"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose debug output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_app_version()}"
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )

    try:
        profile = resolve_profile(args.profile)

        context = profile.to_context(
            is_inter=args.is_inter,
            precision=args.precision,
            tax_exemption=True if args.tax_exemption else None,
            rounding_adjustment=True if args.rounding_adjustment else None,
            is_before_tax=True if args.shipping_before_tax else None,
            item_wise_shipping_tax=True if args.item_wise_shipping_tax else None,
        )
        items = load_cart(args.input)
        volume_discounts = (
            load_volume_discounts(args.volume_discounts) if args.volume_discounts else None
        )

        output = process_cart(
            items,
            context,
            tier_unit=profile.tier_unit,
            volume_discounts=volume_discounts,
            insurance_charges=args.insurance,
        )
    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(output, indent=2, default=json_default))

    if args.strict and output['validation']['status'] == "REVIEW":
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
