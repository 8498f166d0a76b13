"""Utility functions."""
import math
from decimal import Decimal, InvalidOperation
from typing import Optional


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except (TypeError, ValueError):
        return None


def to_decimal(s: Optional[str]) -> Optional[Decimal]:
    """Convert string to Decimal, returning None if conversion fails."""
    if s is None:
        return None
    try:
        value = Decimal(s.strip())
    except (InvalidOperation, AttributeError):
        return None
    # a literal too large for a float is as unusable as a malformed one
    if not value.is_finite() or not math.isfinite(float(value)):
        return None
    return value


def to_float(value: Optional[Decimal]) -> Optional[float]:
    """Decimal to float for JSON-facing models."""
    if value is None:
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return " ".join(text.split())
