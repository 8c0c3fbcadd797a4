"""Shared engine instance for the API routers."""
from ..engine import PricingEngine

engine = PricingEngine()
