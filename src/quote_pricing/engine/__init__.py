"""Engine subpackage - core pricing computation."""
from .pricing_engine import PricingEngine, compute_estimate
from .models import AiComponents, Estimate, PricingBreakdown, PricingConfig

__all__ = ['PricingEngine', 'compute_estimate', 'AiComponents', 'Estimate', 'PricingBreakdown', 'PricingConfig']
