"""
Policy Normalizer - turns a loosely-typed tenant policy row into a PricingPolicy.

Resolution order:
1. pricing_enabled by truthiness (missing / NaN is disabled)
2. Disabled -> assessment only, no model (nothing else is read)
3. ai_mode from the allow-list, RANGE when missing or unrecognized
4. pricing_model from the allow-list, None when missing or unrecognized
"""
import logging
from typing import Any, Mapping

from ..engine.coercion import is_nan
from ..engine.models import DisplayMode, PricingModel, PricingPolicy

logger = logging.getLogger(__name__)

DISABLED_POLICY = PricingPolicy(
    pricing_enabled=False,
    display_mode=DisplayMode.ASSESSMENT_ONLY,
    pricing_model=None,
)


def _field(raw: Any, key: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def normalize_policy(raw: Any) -> PricingPolicy:
    """
    Normalize an untrusted policy record. Never raises.

    Accepts a mapping with ``pricing_enabled`` / ``ai_mode`` / ``pricing_model``,
    any object exposing those attributes, or an existing PricingPolicy.
    """
    if isinstance(raw, PricingPolicy):
        raw = raw.to_dict()

    enabled = _field(raw, "pricing_enabled")
    if enabled is None or is_nan(enabled):
        return DISABLED_POLICY
    try:
        enabled = bool(enabled)
    except (TypeError, ValueError):
        # Ambiguous truth values (arrays, pd.NA) count as disabled
        enabled = False
    if not enabled:
        return DISABLED_POLICY

    display_mode = DisplayMode.parse(_field(raw, "ai_mode"))
    if display_mode is None:
        logger.debug("Unrecognized ai_mode %r, using range", _field(raw, "ai_mode"))
        display_mode = DisplayMode.RANGE

    pricing_model = PricingModel.parse(_field(raw, "pricing_model"))

    return PricingPolicy(
        pricing_enabled=True,
        display_mode=display_mode,
        pricing_model=pricing_model,
    )
