"""
Batch Service - reprices exported quote rows with the current engine.

Each row carries the policy columns (pricing_enabled, ai_mode, pricing_model),
the estimator component columns and optionally per-row config columns that
override a shared tenant config.
"""
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import pandas as pd

from ..display.estimate_formatter import format_estimate
from ..engine.models import PricingConfig
from ..engine.pricing_engine import PricingEngine
from ..policy.policy_normalizer import normalize_policy

logger = logging.getLogger(__name__)

CONFIG_COLUMNS = (
    'flat_rate_default',
    'hourly_labor_rate',
    'material_markup_percent',
    'per_unit_rate',
    'per_unit_label',
    'assessment_fee_amount',
    'assessment_fee_credit_toward_job',
)

OUTPUT_COLUMNS = (
    'estimate_low',
    'estimate_high',
    'resolved_model',
    'display_mode',
    'money_line',
    'label',
    'suppressed',
)


def load_quotes_csv(path: Path) -> pd.DataFrame:
    """Load a quote export; headers and string cells are stripped."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Quote export not found at {path}.")

    df = pd.read_csv(path, true_values=['yes', 'Yes'], false_values=['no', 'No'])
    df.columns = [str(c).strip() for c in df.columns]
    for col in df.columns:
        if df[col].dtype == object or pd.api.types.is_string_dtype(df[col].dtype):
            df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)
    return df


def _row_config(row: dict, base: Optional[PricingConfig]) -> Optional[PricingConfig]:
    overrides = {c: row[c] for c in CONFIG_COLUMNS if row.get(c) is not None}
    if not overrides:
        return base

    merged = asdict(base) if base is not None else {}
    merged.update(overrides)
    return PricingConfig.from_row(merged)


def reprice_frame(
    frame: pd.DataFrame,
    config: Optional[PricingConfig] = None,
    engine: Optional[PricingEngine] = None,
) -> pd.DataFrame:
    """
    Run normalize → compute → format for every row.

    Returns a copy of the frame with the OUTPUT_COLUMNS added. Missing (NaN)
    cells are treated as absent values.
    """
    engine = engine or PricingEngine()
    config = PricingConfig.from_row(config)

    records = frame.astype(object).where(pd.notna(frame), None).to_dict(orient='records')

    outputs = {name: [] for name in OUTPUT_COLUMNS}
    for row in records:
        policy = normalize_policy(row)
        estimate = engine.calculate(policy, _row_config(row, config), row)
        display = format_estimate(
            policy,
            None if estimate.suppressed else estimate.estimate_low,
            None if estimate.suppressed else estimate.estimate_high,
            currency=estimate.breakdown.currency,
        )

        model = estimate.breakdown.model
        outputs['estimate_low'].append(estimate.estimate_low)
        outputs['estimate_high'].append(estimate.estimate_high)
        outputs['resolved_model'].append(model.value if model else None)
        outputs['display_mode'].append(display.mode.value)
        outputs['money_line'].append(display.money_line)
        outputs['label'].append(display.label)
        outputs['suppressed'].append(estimate.suppressed)

    result = frame.copy()
    for name, values in outputs.items():
        # object dtype keeps None as None instead of NaN
        result[name] = pd.Series(values, index=frame.index, dtype=object)

    suppressed = sum(1 for s in outputs['suppressed'] if s)
    logger.info("Repriced %d quote rows (%d suppressed)", len(records), suppressed)
    return result
