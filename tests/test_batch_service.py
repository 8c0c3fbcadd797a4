import pandas as pd
import pytest

from quote_pricing.engine.models import PricingConfig
from quote_pricing.services import load_quotes_csv, reprice_frame


@pytest.fixture
def quotes_frame():
    return pd.DataFrame([
        {"quote_id": "Q1", "pricing_enabled": True, "ai_mode": "range", "pricing_model": "hourly_plus_materials",
         "labor_hours_low": 2, "labor_hours_high": 4, "materials_cost_low": 100, "materials_cost_high": 150,
         "units_low": None, "flat_total_low": None, "flat_total_high": None, "per_unit_rate": None},
        {"quote_id": "Q2", "pricing_enabled": True, "ai_mode": "fixed", "pricing_model": "hourly_plus_materials",
         "labor_hours_low": 2, "labor_hours_high": 4, "materials_cost_low": 100, "materials_cost_high": 150,
         "units_low": None, "flat_total_low": None, "flat_total_high": None, "per_unit_rate": None},
        {"quote_id": "Q3", "pricing_enabled": False, "ai_mode": "range", "pricing_model": "flat_per_job",
         "labor_hours_low": None, "labor_hours_high": None, "materials_cost_low": None, "materials_cost_high": None,
         "units_low": None, "flat_total_low": 500, "flat_total_high": 300, "per_unit_rate": None},
        {"quote_id": "Q4", "pricing_enabled": True, "ai_mode": "range", "pricing_model": "per_unit",
         "labor_hours_low": None, "labor_hours_high": None, "materials_cost_low": None, "materials_cost_high": None,
         "units_low": 3, "flat_total_low": None, "flat_total_high": None, "per_unit_rate": 25},
        {"quote_id": "Q5", "pricing_enabled": True, "ai_mode": "range", "pricing_model": "packages",
         "labor_hours_low": None, "labor_hours_high": None, "materials_cost_low": None, "materials_cost_high": None,
         "units_low": None, "flat_total_low": 400, "flat_total_high": None, "per_unit_rate": None},
    ])


def test_reprice_frame(quotes_frame):
    config = PricingConfig(hourly_labor_rate=80, material_markup_percent=20, per_unit_rate=10)
    result = reprice_frame(quotes_frame, config=config).set_index("quote_id")

    assert list(result.loc["Q1", ["estimate_low", "estimate_high"]]) == [280, 500]
    assert result.loc["Q1", "money_line"] == "$280 – $500"

    assert result.loc["Q2", "money_line"] == "$390"
    assert result.loc["Q2", "label"] == "Estimate"

    assert result.loc["Q3", "estimate_high"] == 0
    assert result.loc["Q3", "display_mode"] == "assessment_only"
    assert result.loc["Q3", "money_line"] is None
    assert result.loc["Q3", "suppressed"] == "pricing_disabled"

    # Row-level rate overrides the shared config
    assert list(result.loc["Q4", ["estimate_low", "estimate_high"]]) == [75, 75]

    assert result.loc["Q5", "estimate_high"] == 0
    assert result.loc["Q5", "resolved_model"] == "packages"
    assert result.loc["Q5", "money_line"] is None


def test_reprice_frame_leaves_input_untouched(quotes_frame):
    before = quotes_frame.copy()
    reprice_frame(quotes_frame)
    pd.testing.assert_frame_equal(quotes_frame, before)


def test_reprice_empty_frame():
    result = reprice_frame(pd.DataFrame(columns=["pricing_enabled", "ai_mode", "pricing_model"]))
    assert result.empty
    assert "estimate_low" in result.columns


def test_load_quotes_csv(tmp_path):
    path = tmp_path / "quotes.csv"
    path.write_text(
        " pricing_enabled , ai_mode,pricing_model,flat_total_low,flat_total_high\n"
        "true, fixed ,flat_per_job,500,300\n"
        "false,range,flat_per_job,100,\n",
        encoding="utf-8",
    )
    frame = load_quotes_csv(path)
    assert list(frame.columns[:2]) == ["pricing_enabled", "ai_mode"]

    result = reprice_frame(frame)
    assert list(result["estimate_low"]) == [400, 0]
    assert list(result["money_line"]) == ["$400", None]
    assert list(result["suppressed"]) == [None, "pricing_disabled"]
    assert list(result["resolved_model"]) == ["flat_per_job", None]


def test_output_columns_keep_missing_values_as_none(quotes_frame):
    result = reprice_frame(quotes_frame)
    for name in ("money_line", "resolved_model", "suppressed"):
        assert result[name].dtype == object
    assert result["money_line"].tolist()[2] is None
    assert result["suppressed"].tolist()[0] is None


def test_load_quotes_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_quotes_csv(tmp_path / "nope.csv")
