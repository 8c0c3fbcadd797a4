"""
Pricing Engine - deterministic computation of an estimate from estimator components.

Takes a tenant pricing policy, the tenant's pricing config and one set of
estimator quantities, and produces:
- A bounded, whole-unit low/high estimate
- A per-model PricingBreakdown
- An execution trace for every resolution step

No industry knowledge lives here and nothing is fetched or stored. Every
input is untrusted: garbage degrades to a zero or suppressed estimate and
the engine never raises.
"""
import logging
from typing import Any, Callable, Optional

from ..policy.policy_normalizer import normalize_policy
from .coercion import (
    clamp_money,
    clamp_non_negative,
    ensure_low_high,
    midpoint,
    to_number,
)
from .models import (
    AiComponents,
    AssessmentFeeBreakdown,
    DisplayMode,
    Estimate,
    FlatBreakdown,
    LaborBreakdown,
    MaterialsBreakdown,
    PerUnitBreakdown,
    PricingBreakdown,
    PricingConfig,
    PricingModel,
    PricingPolicy,
)

logger = logging.getLogger(__name__)

# Models that are recognized but must never surface a price
SUPPRESSED_MODELS = {
    PricingModel.INSPECTION_ONLY: "inspection_only",
    PricingModel.PACKAGES: "unsupported_model",
    PricingModel.LINE_ITEMS: "unsupported_model",
}


def _money(value: int) -> str:
    return f"${value:,}"


class PricingEngine:
    """
    Core engine that resolves an estimate using Policy → Model → Totals.

    Resolution order:
    1. Normalize the policy and parse config / components at the boundary
    2. Select the model (policy first, then the tenant config's stored model)
    3. Suppress when pricing is disabled, assessment-only, or the model is
       inspection-only, not yet implemented, or missing
    4. Compute the per-model low/high subtotal
    5. Order the final total so low <= high
    6. In fixed mode, collapse both sides to the rounded midpoint
    """

    def __init__(self):
        self._handlers: dict[PricingModel, Callable] = {
            PricingModel.HOURLY_PLUS_MATERIALS: self._compute_hourly_plus_materials,
            PricingModel.PER_UNIT: self._compute_per_unit,
            PricingModel.FLAT_PER_JOB: self._compute_flat_per_job,
            PricingModel.ASSESSMENT_FEE: self._compute_assessment_fee,
        }

    @property
    def supported_models(self) -> list[PricingModel]:
        return list(self._handlers)

    def calculate(self, policy: Any, config: Any, components: Any) -> Estimate:
        """
        Compute an estimate with full traceability.

        Args:
            policy: Raw or normalized tenant pricing policy
            config: PricingConfig, a raw settings row, or None
            components: AiComponents or raw estimator output

        Returns:
            Estimate with breakdown and trace
        """
        policy = normalize_policy(policy)
        config = PricingConfig.from_row(config)
        components = AiComponents.from_dict(components)

        model = self._select_model(policy, config)
        breakdown = PricingBreakdown(model=model, currency=components.currency_code)
        estimate = Estimate(estimate_low=0, estimate_high=0, breakdown=breakdown)

        estimate.add_trace(
            "Policy",
            "Pricing enabled" if policy.pricing_enabled else "Pricing disabled",
            policy.display_mode.value,
        )
        estimate.add_trace("Model Selection", "Resolved pricing model", model.value if model else "none")

        reason = self._suppression_reason(policy, model)
        if reason:
            logger.debug("Suppressing estimate (model=%s): %s", model.value if model else None, reason)
            estimate.suppressed = reason
            estimate.add_trace("Suppressed", "No price may be shown", reason)
            return estimate

        total_low, total_high = self._handlers[model](config, components, estimate)

        low, high = ensure_low_high(total_low, total_high)
        if low != clamp_money(total_low):
            estimate.add_trace("Ordering", "Inverted totals corrected", f"{_money(low)} – {_money(high)}")

        if policy.display_mode is DisplayMode.FIXED:
            mid = midpoint(low, high)
            estimate.add_trace("Fixed Collapse", f"Midpoint of {_money(low)} – {_money(high)}", _money(mid))
            low = high = mid

        breakdown.total_low = low
        breakdown.total_high = high
        estimate.estimate_low = low
        estimate.estimate_high = high
        estimate.add_trace("Total", "Final estimate", f"{_money(low)} – {_money(high)}")
        return estimate

    def _select_model(self, policy: PricingPolicy, config: Optional[PricingConfig]) -> Optional[PricingModel]:
        if not policy.pricing_enabled:
            return None
        if policy.pricing_model is not None:
            return policy.pricing_model
        return config.model if config else None

    def _suppression_reason(self, policy: PricingPolicy, model: Optional[PricingModel]) -> Optional[str]:
        if not policy.pricing_enabled:
            return "pricing_disabled"
        if policy.display_mode is DisplayMode.ASSESSMENT_ONLY:
            return "assessment_only"
        if model is None:
            return "no_model"
        if model in SUPPRESSED_MODELS:
            return SUPPRESSED_MODELS[model]
        if model not in self._handlers:
            return "unsupported_model"
        return None

    def _compute_hourly_plus_materials(
        self, config: Optional[PricingConfig], c: AiComponents, estimate: Estimate
    ) -> tuple[int, int]:
        rate = clamp_money(to_number(config.hourly_labor_rate if config else None))
        markup = clamp_non_negative(to_number(config.material_markup_percent if config else None))

        hours_low = clamp_non_negative(to_number(c.labor_hours_low))
        hours_high = clamp_non_negative(to_number(c.labor_hours_high, hours_low))

        mat_low = clamp_non_negative(to_number(c.materials_cost_low))
        mat_high = clamp_non_negative(to_number(c.materials_cost_high, mat_low))

        labor_low = clamp_money(hours_low * rate)
        labor_high = clamp_money(hours_high * rate)

        materials_low = clamp_money(mat_low * (1 + markup / 100))
        materials_high = clamp_money(mat_high * (1 + markup / 100))

        # Low and high sides are computed independently; only the total is reordered
        estimate.breakdown.labor = LaborBreakdown(
            hours_low=hours_low,
            hours_high=hours_high,
            rate=rate,
            subtotal_low=labor_low,
            subtotal_high=labor_high,
        )
        estimate.breakdown.materials = MaterialsBreakdown(
            cost_low=mat_low,
            cost_high=mat_high,
            markup_percent=markup,
            subtotal_low=materials_low,
            subtotal_high=materials_high,
        )
        estimate.add_trace("Labor", f"{hours_low:g}–{hours_high:g} h × {_money(rate)}",
                           f"{_money(labor_low)} – {_money(labor_high)}")
        estimate.add_trace("Materials", f"Cost with {markup:g}% markup",
                           f"{_money(materials_low)} – {_money(materials_high)}")

        return labor_low + materials_low, labor_high + materials_high

    def _compute_per_unit(
        self, config: Optional[PricingConfig], c: AiComponents, estimate: Estimate
    ) -> tuple[int, int]:
        unit_rate = clamp_money(to_number(config.per_unit_rate if config else None))
        units_low = clamp_non_negative(to_number(c.units_low))
        units_high = clamp_non_negative(to_number(c.units_high, units_low))

        total_low = clamp_money(units_low * unit_rate)
        total_high = clamp_money(units_high * unit_rate)

        unit_label = config.per_unit_label if config else None
        estimate.breakdown.per_unit = PerUnitBreakdown(
            units_low=units_low,
            units_high=units_high,
            unit_rate=unit_rate,
            unit_label=unit_label,
            subtotal_low=total_low,
            subtotal_high=total_high,
        )
        estimate.add_trace("Per Unit", f"{units_low:g}–{units_high:g} {unit_label or 'units'} × {_money(unit_rate)}",
                           f"{_money(total_low)} – {_money(total_high)}")
        return total_low, total_high

    def _flat_range(
        self, config: Optional[PricingConfig], c: AiComponents, estimate: Estimate
    ) -> tuple[int, int]:
        default = clamp_money(to_number(config.flat_rate_default if config else None))
        low_raw = to_number(c.flat_total_low, default)
        high_raw = to_number(c.flat_total_high, low_raw)
        low, high = ensure_low_high(low_raw, high_raw)
        if low != clamp_money(low_raw):
            estimate.add_trace("Ordering", "Inverted job total corrected", f"{_money(low)} – {_money(high)}")
        return low, high

    def _compute_flat_per_job(
        self, config: Optional[PricingConfig], c: AiComponents, estimate: Estimate
    ) -> tuple[int, int]:
        low, high = self._flat_range(config, c, estimate)
        estimate.breakdown.flat = FlatBreakdown(subtotal_low=low, subtotal_high=high)
        estimate.add_trace("Flat", "Job total", f"{_money(low)} – {_money(high)}")
        return low, high

    def _compute_assessment_fee(
        self, config: Optional[PricingConfig], c: AiComponents, estimate: Estimate
    ) -> tuple[int, int]:
        # Fee is recorded beside the job range and never summed into it
        fee = clamp_money(to_number(config.assessment_fee_amount if config else None))
        credit = bool(config.assessment_fee_credit_toward_job) if config else False
        low, high = self._flat_range(config, c, estimate)

        estimate.breakdown.assessment_fee = AssessmentFeeBreakdown(
            fee=fee,
            credit_toward_job=credit,
            subtotal_low=low,
            subtotal_high=high,
        )
        estimate.add_trace(
            "Assessment Fee",
            "Credited toward job" if credit else "Not credited toward job",
            _money(fee),
        )
        estimate.add_trace("Flat", "Job total", f"{_money(low)} – {_money(high)}")
        return low, high


_default_engine = PricingEngine()


def compute_estimate(policy: Any, config: Any, components: Any) -> Estimate:
    """Module-level entry point using a shared, stateless engine."""
    return _default_engine.calculate(policy, config, components)
