"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation. Inputs that
arrive from storage or the estimator go through the ``from_row`` /
``from_dict`` constructors, which never raise and degrade garbage to None.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from .coercion import clamp_money, is_nan, to_optional_number


DEFAULT_CURRENCY = "USD"


class DisplayMode(str, Enum):
    ASSESSMENT_ONLY = "assessment_only"
    RANGE = "range"
    FIXED = "fixed"

    @classmethod
    def parse(cls, value: Any) -> Optional["DisplayMode"]:
        """Case-insensitive lookup, None when unrecognized."""
        if isinstance(value, cls):
            return value
        if value is None or is_nan(value):
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class PricingModel(str, Enum):
    FLAT_PER_JOB = "flat_per_job"
    HOURLY_PLUS_MATERIALS = "hourly_plus_materials"
    PER_UNIT = "per_unit"
    PACKAGES = "packages"
    LINE_ITEMS = "line_items"
    INSPECTION_ONLY = "inspection_only"
    ASSESSMENT_FEE = "assessment_fee"

    @classmethod
    def parse(cls, value: Any) -> Optional["PricingModel"]:
        """Case-insensitive lookup, None when unrecognized."""
        if isinstance(value, cls):
            return value
        if value is None or is_nan(value):
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def _pick(row: Any, *keys: str) -> Any:
    """First non-missing value for any of the keys (dict rows or attribute rows)."""
    for key in keys:
        if isinstance(row, Mapping):
            value = row.get(key)
        else:
            value = getattr(row, key, None)
        if value is not None and not is_nan(value):
            return value
    return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None or is_nan(value):
        return None
    text = str(value).strip()
    return text or None


FALSE_STRINGS = {"", "false", "no", "n", "off", "0"}


def _truthy(value: Any) -> bool:
    """Pass-through flags; boolean-like strings such as "false" read as False."""
    if value is None or is_nan(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    try:
        return bool(value)
    except (TypeError, ValueError):
        return False


@dataclass(frozen=True)
class PricingPolicy:
    """Normalized tenant pricing policy. Build it with ``normalize_policy``."""
    pricing_enabled: bool = False
    display_mode: DisplayMode = DisplayMode.ASSESSMENT_ONLY
    pricing_model: Optional[PricingModel] = None

    def to_dict(self) -> dict:
        return {
            "pricing_enabled": self.pricing_enabled,
            "ai_mode": self.display_mode.value,
            "pricing_model": self.pricing_model.value if self.pricing_model else None,
        }


@dataclass(frozen=True)
class PricingConfig:
    """Tenant numeric pricing parameters (one settings row)."""
    model: Optional[PricingModel] = None

    # flat
    flat_rate_default: Optional[float] = None

    # hourly + materials
    hourly_labor_rate: Optional[float] = None
    material_markup_percent: Optional[float] = None

    # per-unit
    per_unit_rate: Optional[float] = None
    per_unit_label: Optional[str] = None

    # packages / line items, structure validated elsewhere
    package_json: Any = None
    line_items_json: Any = None

    # assessment fee
    assessment_fee_amount: Optional[float] = None
    assessment_fee_credit_toward_job: bool = False

    @classmethod
    def from_row(cls, row: Any) -> Optional["PricingConfig"]:
        """
        Parse a loosely-typed settings row (snake_case columns or camelCase keys).

        Returns None when there is no row at all, so callers can treat
        "never configured" the same as a missing config.
        """
        if row is None:
            return None
        if isinstance(row, cls):
            return row
        return cls(
            model=PricingModel.parse(_pick(row, "pricing_model", "model")),
            flat_rate_default=to_optional_number(_pick(row, "flat_rate_default", "flatRateDefault")),
            hourly_labor_rate=to_optional_number(_pick(row, "hourly_labor_rate", "hourlyLaborRate")),
            material_markup_percent=to_optional_number(
                _pick(row, "material_markup_percent", "materialMarkupPercent")
            ),
            per_unit_rate=to_optional_number(_pick(row, "per_unit_rate", "perUnitRate")),
            per_unit_label=_optional_text(_pick(row, "per_unit_label", "perUnitLabel")),
            package_json=_pick(row, "package_json", "packageJson"),
            line_items_json=_pick(row, "line_items_json", "lineItemsJson"),
            assessment_fee_amount=to_optional_number(
                _pick(row, "assessment_fee_amount", "assessmentFeeAmount")
            ),
            assessment_fee_credit_toward_job=_truthy(
                _pick(row, "assessment_fee_credit_toward_job", "assessmentFeeCreditTowardJob")
            ),
        )


@dataclass(frozen=True)
class AiComponents:
    """
    One estimation attempt from the upstream estimator.

    Narrative fields and the confidence / inspection flags are passed through
    untouched. Quantity fields may hold anything; the engine coerces them.
    """
    currency: Optional[str] = None
    summary: str = ""
    confidence: Optional[str] = None
    inspection_required: bool = False
    visible_scope: tuple = ()
    assumptions: tuple = ()
    questions: tuple = ()

    labor_hours_low: Any = None
    labor_hours_high: Any = None

    materials_cost_low: Any = None
    materials_cost_high: Any = None

    units_low: Any = None
    units_high: Any = None

    flat_total_low: Any = None
    flat_total_high: Any = None

    @classmethod
    def from_dict(cls, raw: Any) -> "AiComponents":
        """Build from raw estimator output; unknown keys are ignored."""
        if isinstance(raw, cls):
            return raw
        if raw is None:
            raw = {}

        def _list(key: str) -> tuple:
            value = _pick(raw, key)
            if isinstance(value, (list, tuple)):
                return tuple(str(v) for v in value if v)
            return ()

        return cls(
            currency=_optional_text(_pick(raw, "currency")),
            summary=_optional_text(_pick(raw, "summary")) or "",
            confidence=_optional_text(_pick(raw, "confidence")),
            inspection_required=_truthy(_pick(raw, "inspection_required")),
            visible_scope=_list("visible_scope"),
            assumptions=_list("assumptions"),
            questions=_list("questions"),
            labor_hours_low=to_optional_number(_pick(raw, "labor_hours_low")),
            labor_hours_high=to_optional_number(_pick(raw, "labor_hours_high")),
            materials_cost_low=to_optional_number(_pick(raw, "materials_cost_low")),
            materials_cost_high=to_optional_number(_pick(raw, "materials_cost_high")),
            units_low=to_optional_number(_pick(raw, "units_low")),
            units_high=to_optional_number(_pick(raw, "units_high")),
            flat_total_low=to_optional_number(_pick(raw, "flat_total_low")),
            flat_total_high=to_optional_number(_pick(raw, "flat_total_high")),
        )

    @property
    def currency_code(self) -> str:
        return (str(self.currency or "").strip() or DEFAULT_CURRENCY).upper()


@dataclass(frozen=True)
class PricingRules:
    """Tenant guardrails applied after computation."""
    min_job: Optional[int] = None
    max_without_inspection: Optional[int] = None

    @classmethod
    def from_row(cls, row: Any) -> Optional["PricingRules"]:
        if row is None:
            return None
        if isinstance(row, cls):
            return row

        def _positive(*keys: str) -> Optional[int]:
            number = to_optional_number(_pick(row, *keys))
            if number is None or number <= 0:
                return None
            return clamp_money(number)

        return cls(
            min_job=_positive("min_job", "minJob"),
            max_without_inspection=_positive("max_without_inspection", "maxWithoutInspection"),
        )


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class LaborBreakdown:
    hours_low: float
    hours_high: float
    rate: int
    subtotal_low: int
    subtotal_high: int


@dataclass
class MaterialsBreakdown:
    cost_low: float
    cost_high: float
    markup_percent: float
    subtotal_low: int
    subtotal_high: int


@dataclass
class PerUnitBreakdown:
    units_low: float
    units_high: float
    unit_rate: int
    unit_label: Optional[str]
    subtotal_low: int
    subtotal_high: int


@dataclass
class FlatBreakdown:
    subtotal_low: int
    subtotal_high: int


@dataclass
class AssessmentFeeBreakdown:
    """
    The fee is informational: it is never added into the job totals.
    ``subtotal_low`` / ``subtotal_high`` are the job range, not fee + job.
    """
    fee: int
    credit_toward_job: bool
    subtotal_low: int
    subtotal_high: int


@dataclass
class PricingBreakdown:
    """Per-category accounting of how a total was derived."""
    model: Optional[PricingModel]
    currency: str
    total_low: int = 0
    total_high: int = 0

    # Exactly one group is set, matching the model
    labor: Optional[LaborBreakdown] = None
    materials: Optional[MaterialsBreakdown] = None
    per_unit: Optional[PerUnitBreakdown] = None
    flat: Optional[FlatBreakdown] = None
    assessment_fee: Optional[AssessmentFeeBreakdown] = None

    def to_dict(self) -> dict:
        data = {
            "model": self.model.value if self.model else None,
            "currency": self.currency,
        }
        for name in ("labor", "materials", "per_unit", "flat", "assessment_fee"):
            part = getattr(self, name)
            if part is not None:
                data[name] = dict(part.__dict__)
        data["total_low"] = self.total_low
        data["total_high"] = self.total_high
        return data


@dataclass
class Estimate:
    """Complete result of a pricing computation."""
    estimate_low: int
    estimate_high: int
    breakdown: PricingBreakdown
    suppressed: Optional[str] = None  # reason code when no price may be shown
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the resolution trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Persistence shape, stored verbatim on the quote record."""
        return {
            "estimate_low": self.estimate_low,
            "estimate_high": self.estimate_high,
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class Display:
    """Display-ready price line for UI and email templates."""
    mode: DisplayMode
    money_line: Optional[str]
    label: str

    def to_dict(self) -> dict:
        return {"mode": self.mode.value, "moneyLine": self.money_line, "label": self.label}
