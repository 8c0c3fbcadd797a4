"""Policy subpackage - policy normalization and tenant guardrails."""
from .policy_normalizer import normalize_policy
from .guardrails import apply_guardrails, GuardrailOutcome

__all__ = ['normalize_policy', 'apply_guardrails', 'GuardrailOutcome']
