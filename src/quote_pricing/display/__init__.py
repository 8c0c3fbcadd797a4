"""Display subpackage - price line formatting."""
from .estimate_formatter import format_estimate, format_money

__all__ = ['format_estimate', 'format_money']
