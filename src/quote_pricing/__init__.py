"""
Quote Pricing Package

Deterministic pricing resolution for AI-assisted quotes.
Resolves a displayable estimate using Policy → Model → Totals → Display.
"""
from .engine import PricingEngine, compute_estimate
from .engine.models import (
    AiComponents,
    Display,
    DisplayMode,
    Estimate,
    PricingBreakdown,
    PricingConfig,
    PricingModel,
    PricingPolicy,
    PricingRules,
)
from .policy import normalize_policy, apply_guardrails, GuardrailOutcome
from .display import format_estimate, format_money

__version__ = "1.0.0"

__all__ = [
    'PricingEngine', 'compute_estimate', 'normalize_policy', 'format_estimate', 'format_money',
    'apply_guardrails', 'GuardrailOutcome',
    'AiComponents', 'Display', 'DisplayMode', 'Estimate', 'PricingBreakdown',
    'PricingConfig', 'PricingModel', 'PricingPolicy', 'PricingRules',
]
