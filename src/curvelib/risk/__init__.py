"""
Risk package - market-quote sensitivities and finite-difference oracles.

Provides:
- market_quote_sensitivity: parameter sensitivities -> quote sensitivities
- MarketQuoteSensitivityCalculator: instrument and portfolio quote risk
- ParameterBumpEngine / QuoteBumpEngine: bump-and-reprice validation
"""

from .market_quote import (
    market_quote_sensitivity,
    market_quote_sensitivity_frame,
    MarketQuoteSensitivityCalculator,
)
from .bumping import DEFAULT_SHIFT, ParameterBumpEngine, QuoteBumpEngine

__all__ = [
    "market_quote_sensitivity",
    "market_quote_sensitivity_frame",
    "MarketQuoteSensitivityCalculator",
    "DEFAULT_SHIFT",
    "ParameterBumpEngine",
    "QuoteBumpEngine",
]
