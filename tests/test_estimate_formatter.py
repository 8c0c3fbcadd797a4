import pytest

from quote_pricing.display import format_estimate, format_money
from quote_pricing.engine import compute_estimate
from quote_pricing.engine.models import DisplayMode


class TestFormatMoney:
    @pytest.mark.parametrize("value,expected", [
        (0, "$0"),
        (280, "$280"),
        (1234567, "$1,234,567"),
        (99.5, "$100"),
        (1249.49, "$1,249"),
        (-50, "-$50"),
    ])
    def test_whole_units_with_separators(self, value, expected):
        assert format_money(value) == expected

    def test_known_and_unknown_currencies(self):
        assert format_money(1500, "gbp") == "£1,500"
        assert format_money(1500, "CAD") == "CA$1,500"
        assert format_money(1500, "JPY") == "JPY 1,500"
        assert format_money(1500, "") == "$1,500"


class TestFormatEstimate:
    def test_disabled_tenant(self):
        display = format_estimate({"pricing_enabled": False, "ai_mode": "range"}, 100, 200)
        assert display.to_dict() == {"mode": "assessment_only", "moneyLine": None, "label": "Assessment only"}

    def test_assessment_only_enabled(self, make_policy):
        display = format_estimate(make_policy("assessment_only"), 100, 200)
        assert display.mode is DisplayMode.ASSESSMENT_ONLY
        assert display.money_line is None

    def test_range_with_both_sides(self, make_policy):
        display = format_estimate(make_policy("range"), 280, 500)
        assert display.money_line == "$280 – $500"
        assert display.label == "Estimate range"

    @pytest.mark.parametrize("low,high,expected", [
        (280, None, "$280"),
        (None, 500, "$500"),
        ("abc", "1200", "$1,200"),
        (None, None, None),
        (float("nan"), "", None),
    ])
    def test_range_with_missing_sides(self, make_policy, low, high, expected):
        display = format_estimate(make_policy("range"), low, high)
        assert display.money_line == expected
        assert display.label == "Estimate range"

    @pytest.mark.parametrize("low,high,expected", [
        (390, 390, "$390"),
        (300, 500, "$300"),
        (None, 450, "$450"),
        (None, None, None),
    ])
    def test_fixed_prefers_low(self, make_policy, low, high, expected):
        display = format_estimate(make_policy("fixed"), low, high)
        assert display.money_line == expected
        assert display.label == "Estimate"

    def test_unrecognized_mode_formats_as_range(self):
        display = format_estimate({"pricing_enabled": True, "ai_mode": "quote"}, 10, 20)
        assert display.mode is DisplayMode.RANGE

    def test_formatting_is_idempotent(self, make_policy):
        policy = make_policy("range", "per_unit")
        assert format_estimate(policy, 1000, 2500) == format_estimate(policy, 1000, 2500)

    def test_currency_is_applied_to_both_sides(self, make_policy):
        display = format_estimate(make_policy("range"), 1000, 2500, currency="EUR")
        assert display.money_line == "€1,000 – €2,500"


def test_end_to_end_fixed_hourly(make_policy, hourly_config, hourly_components):
    policy = make_policy("fixed", "hourly_plus_materials")
    estimate = compute_estimate(policy, hourly_config, hourly_components)
    display = format_estimate(policy, estimate.estimate_low, estimate.estimate_high)
    assert display.money_line == "$390"
    assert display.label == "Estimate"


def test_end_to_end_disabled(hourly_config, hourly_components):
    policy = {"pricing_enabled": False}
    estimate = compute_estimate(policy, hourly_config, hourly_components)
    display = format_estimate(policy, estimate.estimate_low, estimate.estimate_high)
    assert (estimate.estimate_low, estimate.estimate_high) == (0, 0)
    assert display.to_dict() == {"mode": "assessment_only", "moneyLine": None, "label": "Assessment only"}
