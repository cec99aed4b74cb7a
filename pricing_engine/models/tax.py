"""Tax classification data models supplied by catalog (HSN) data."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..pipeline.number_normalizer import to_decimal_or_default


@dataclass(frozen=True)
class TaxComponent:
    """One tax component of a jurisdiction's rule set.

    Attributes:
        tax_name: Component name, e.g. "GST", "CGST", "CESS"
        rate: Percentage rate
        compound: True if computed on the tax accumulated so far instead of
            on the taxable base
    """

    tax_name: str
    rate: Decimal = Decimal("0")
    compound: bool = False

    def __post_init__(self):
        if not self.tax_name:
            raise ValueError("TaxComponent must have a tax_name")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TaxComponent':
        """Create from a catalog `taxReqLs` entry."""
        return cls(
            tax_name=data.get('taxName', ''),
            rate=to_decimal_or_default(data.get('rate')),
            compound=bool(data.get('compound', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'taxName': self.tax_name, 'rate': self.rate, 'compound': self.compound}


@dataclass(frozen=True)
class TaxRuleSet:
    """Tax rules for one jurisdiction (inter or intra)."""

    total_tax: Decimal = Decimal("0")
    components: List[TaxComponent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['TaxRuleSet']:
        if not data:
            return None
        return cls(
            total_tax=to_decimal_or_default(data.get('totalTax')),
            components=[TaxComponent.from_dict(c) for c in data.get('taxReqLs') or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalTax': self.total_tax,
            'taxReqLs': [c.to_dict() for c in self.components],
        }


@dataclass(frozen=True)
class HsnDetails:
    """Catalog tax classification for a product.

    Either jurisdiction may be absent; the engine then taxes at zero.
    """

    hsn_code: Optional[str] = None
    inter_tax: Optional[TaxRuleSet] = None
    intra_tax: Optional[TaxRuleSet] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['HsnDetails']:
        if not data:
            return None
        return cls(
            hsn_code=data.get('hsnCode'),
            inter_tax=TaxRuleSet.from_dict(data.get('interTax')),
            intra_tax=TaxRuleSet.from_dict(data.get('intraTax')),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.hsn_code is not None:
            data['hsnCode'] = self.hsn_code
        if self.inter_tax is not None:
            data['interTax'] = self.inter_tax.to_dict()
        if self.intra_tax is not None:
            data['intraTax'] = self.intra_tax.to_dict()
        return data


@dataclass(frozen=True)
class TaxBreakup:
    """A tax component as actually applied to a line item."""

    tax_name: str
    tax_percentage: Decimal
    compound: bool = False

    @classmethod
    def from_component(cls, component: TaxComponent) -> 'TaxBreakup':
        return cls(
            tax_name=component.tax_name,
            tax_percentage=component.rate,
            compound=component.compound,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TaxBreakup':
        return cls(
            tax_name=data.get('taxName', ''),
            tax_percentage=to_decimal_or_default(data.get('taxPercentage')),
            compound=bool(data.get('compound', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'taxName': self.tax_name,
            'taxPercentage': self.tax_percentage,
            'compound': self.compound,
        }
