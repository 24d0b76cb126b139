"""Numeric input sanitization shared by the calculators and mappers.

Malformed numbers never raise: they degrade to 0 (or to None for optional
fields) so that the worst outcome of bad input is no zakat due.
"""
import math
from typing import Optional


def to_non_negative_number(value) -> float:
    """Convert a number or numeric string to a finite float >= 0.

    None, empty strings, non-numeric values, NaN, infinities and negatives
    all become 0.
    """
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0
    return parsed


def to_positive_number_or_none(value) -> Optional[float]:
    """Like to_non_negative_number, but returns None unless the value is > 0."""
    parsed = to_non_negative_number(value)
    return parsed if parsed > 0 else None


def to_whole_count(value) -> int:
    """Sanitize an animal count: invalid or negative -> 0, fractions floored."""
    return int(math.floor(to_non_negative_number(value)))
