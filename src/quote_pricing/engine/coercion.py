"""
Numeric coercion helpers shared by the engine, guardrails and formatter.

Every number that reaches the engine comes from an upstream estimator or a
loosely-typed database row, so nothing here raises: anything that cannot be
read as a finite number falls back.
"""
import math
from typing import Any, Optional


def to_optional_number(value: Any) -> Optional[float]:
    """Parse a value as a finite float, or return None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_number(value: Any, fallback: float = 0.0) -> float:
    """Parse as a number, else fallback."""
    number = to_optional_number(value)
    return fallback if number is None else number


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_non_negative(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, value)


def clamp_money(value: float) -> int:
    """Whole currency units, never negative."""
    # Sums of whole units can outgrow a float
    if isinstance(value, int) and not isinstance(value, bool):
        return max(0, value)
    if not math.isfinite(value):
        return 0
    return max(0, round_half_up(value))


def ensure_low_high(low: float, high: float) -> tuple[int, int]:
    """Clamp both sides to money and return them in ascending order."""
    a = clamp_money(low)
    b = clamp_money(high)
    return (a, b) if a <= b else (b, a)


def midpoint(low: int, high: int) -> int:
    """Half-up midpoint of two whole-unit amounts."""
    return clamp_money((clamp_money(low) + clamp_money(high) + 1) // 2)


def is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)
