"""
Estimate Formatter - renders a display-ready price line for a policy.

Independent of the engine: it takes raw low/high numbers, so cached or
externally sourced estimates can be formatted the same way.
"""
from typing import Any, Optional

from ..engine.coercion import round_half_up, to_optional_number
from ..engine.models import DEFAULT_CURRENCY, Display, DisplayMode
from ..policy.policy_normalizer import normalize_policy

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
}

LABELS = {
    DisplayMode.ASSESSMENT_ONLY: "Assessment only",
    DisplayMode.FIXED: "Estimate",
    DisplayMode.RANGE: "Estimate range",
}

RANGE_SEPARATOR = " – "


def format_money(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """Whole currency units with thousands separators, e.g. ``$1,250``."""
    amount = round_half_up(value)
    sign = "-" if amount < 0 else ""
    code = (currency or DEFAULT_CURRENCY).strip().upper() or DEFAULT_CURRENCY
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {abs(amount):,}"
    return f"{sign}{symbol}{abs(amount):,}"


def format_estimate(
    policy: Any,
    estimate_low: Any,
    estimate_high: Any,
    currency: str = DEFAULT_CURRENCY,
) -> Display:
    """
    Format an estimate for the policy's display mode. Never raises.

    A side counts as present when it reads as a finite number.
    """
    mode = normalize_policy(policy).display_mode
    label = LABELS[mode]

    if mode is DisplayMode.ASSESSMENT_ONLY:
        return Display(mode=mode, money_line=None, label=label)

    low = to_optional_number(estimate_low)
    high = to_optional_number(estimate_high)

    money_line: Optional[str] = None
    if mode is DisplayMode.FIXED:
        one = low if low is not None else high
        if one is not None:
            money_line = format_money(one, currency)
    elif low is not None and high is not None:
        money_line = f"{format_money(low, currency)}{RANGE_SEPARATOR}{format_money(high, currency)}"
    elif low is not None:
        money_line = format_money(low, currency)
    elif high is not None:
        money_line = format_money(high, currency)

    return Display(mode=mode, money_line=money_line, label=label)
