"""
Guardrails - applies a tenant's pricing rules to a computed estimate.
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..engine.coercion import ensure_low_high, midpoint
from ..engine.models import DisplayMode, Estimate, PricingModel, PricingRules
from .policy_normalizer import normalize_policy

logger = logging.getLogger(__name__)


@dataclass
class GuardrailOutcome:
    """Estimate after guardrails, plus the inspection decision."""
    estimate: Estimate
    inspection_required: bool
    applied: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "estimate_low": self.estimate.estimate_low,
            "estimate_high": self.estimate.estimate_high,
            "inspection_required": self.inspection_required,
            "applied": list(self.applied),
        }


def apply_guardrails(
    policy: Any,
    estimate: Estimate,
    rules: Any,
    inspection_required: bool = False,
) -> GuardrailOutcome:
    """
    Apply min-job and max-without-inspection rules.

    The input estimate is left untouched; a copy carries the adjusted totals.

    1. Suppressed estimates pass through (inspection-only always forces inspection);
       a disabled or assessment-only policy zeroes any priced estimate
    2. min_job raises both sides to at least the minimum
    3. A high side above max_without_inspection forces inspection and is clamped
    4. Totals are reordered and fixed mode collapses again
    """
    policy = normalize_policy(policy)
    rules = PricingRules.from_row(rules)
    inspection_required = bool(inspection_required)

    if estimate.suppressed:
        if estimate.breakdown.model is PricingModel.INSPECTION_ONLY and policy.pricing_enabled:
            inspection_required = True
        return GuardrailOutcome(estimate=estimate, inspection_required=inspection_required)

    # An estimate priced under another policy may not surface a price here
    if not policy.pricing_enabled or policy.display_mode is DisplayMode.ASSESSMENT_ONLY:
        reason = "pricing_disabled" if not policy.pricing_enabled else "assessment_only"
        return GuardrailOutcome(estimate=_suppressed_copy(estimate, reason), inspection_required=inspection_required)

    result = copy.deepcopy(estimate)
    applied: list[str] = []
    low, high = result.estimate_low, result.estimate_high

    if rules is not None and rules.min_job:
        if low < rules.min_job or high < rules.min_job:
            low = max(low, rules.min_job)
            high = max(high, rules.min_job)
            applied.append("min_job")
            result.add_trace("Guardrail", "Minimum job applied", f"${rules.min_job:,}")

    max_allowed: Optional[int] = rules.max_without_inspection if rules is not None else None
    if not inspection_required and max_allowed and high > max_allowed:
        inspection_required = True
        high = max_allowed
        low = min(low, high)
        applied.append("max_without_inspection")
        result.add_trace("Guardrail", "Above max without inspection, inspection forced", f"${max_allowed:,}")

    low, high = ensure_low_high(low, high)
    if policy.display_mode is DisplayMode.FIXED:
        low = high = midpoint(low, high)

    result.estimate_low = low
    result.estimate_high = high
    result.breakdown.total_low = low
    result.breakdown.total_high = high

    if applied:
        logger.debug("Guardrails applied: %s -> %s/%s", ", ".join(applied), low, high)

    return GuardrailOutcome(estimate=result, inspection_required=inspection_required, applied=applied)


def _suppressed_copy(estimate: Estimate, reason: str) -> Estimate:
    result = copy.deepcopy(estimate)
    breakdown = result.breakdown
    breakdown.labor = breakdown.materials = breakdown.per_unit = None
    breakdown.flat = breakdown.assessment_fee = None
    breakdown.total_low = breakdown.total_high = 0
    result.estimate_low = result.estimate_high = 0
    result.suppressed = reason
    result.add_trace("Suppressed", "No price may be shown", reason)
    logger.debug("Priced estimate suppressed by policy: %s", reason)
    return result
