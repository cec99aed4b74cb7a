"""Utilities for normalizing catalog and cart numbers to Decimal."""

from decimal import Decimal, InvalidOperation
import math
import re
from typing import Any, Optional


_NUMERIC_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def to_decimal(value: Any) -> Decimal:
    """Normalize a number-like value to Decimal.

    Rules:
    - Decimal is returned unchanged
    - int is converted exactly (bool is rejected)
    - float goes through repr so 0.1 becomes Decimal("0.1")
    - strings are trimmed; thousands separators are not accepted
    - NaN, infinity and anything else raise ValueError
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Non-finite number: {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"Boolean is not a number: {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"Non-finite number: {value!r}")
        return Decimal(repr(value))
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise ValueError("Input text is empty")
        if not _NUMERIC_PATTERN.fullmatch(raw):
            raise ValueError(f"Invalid numeric format: {value!r}")
        try:
            return Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid numeric format: {value!r}") from exc
    raise ValueError(f"Unsupported numeric type: {type(value).__name__}")


def to_decimal_or_default(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Like to_decimal, but absent values (None, "") map to default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return to_decimal(value)


def optional_decimal(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but None and "" stay None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_decimal(value)
