"""
Pricers package - present values and curve sensitivities of instruments.
"""

from .dispatcher import (
    PricerOutput,
    price,
    curve_sensitivity,
    par_rate,
    par_rate_sensitivity,
    price_trade,
    price_portfolio,
    curve_sensitivity_portfolio,
)

__all__ = [
    "PricerOutput",
    "price",
    "curve_sensitivity",
    "par_rate",
    "par_rate_sensitivity",
    "price_trade",
    "price_portfolio",
    "curve_sensitivity_portfolio",
]
