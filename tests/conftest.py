import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from quote_pricing.engine import PricingEngine
from quote_pricing.engine.models import PricingConfig


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def hourly_config():
    return PricingConfig(hourly_labor_rate=80, material_markup_percent=20)


@pytest.fixture
def hourly_components():
    return {
        "labor_hours_low": 2,
        "labor_hours_high": 4,
        "materials_cost_low": 100,
        "materials_cost_high": 150,
    }


@pytest.fixture
def make_policy():
    """Raw policy row as stored by the settings table."""
    def _make(mode="range", model=None, enabled=True):
        return {"pricing_enabled": enabled, "ai_mode": mode, "pricing_model": model}
    return _make
