"""CartValidationResult data model representing cart consistency checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

VALID_STATUSES = ("OK", "REVIEW")


@dataclass
class CartValidationResult:
    """Validation result for a priced cart.

    Attributes:
        status: Cart status ("OK" or "REVIEW")
        errors: Consistency failures; any error makes the status REVIEW
        warnings: Findings worth showing that do not block the cart
    """

    status: str
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate CartValidationResult fields."""
        if self.status not in VALID_STATUSES:
            raise ValueError(
                f"status must be 'OK' or 'REVIEW', got '{self.status}'"
            )

    @property
    def passed(self) -> bool:
        return self.status == "OK"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'errors': list(self.errors),
            'warnings': list(self.warnings),
        }
