"""
CurveLib: Multi-Curve Calibration & Market-Quote Risk Library

A modular library for:
- Calibrating discount and forward curves from market quotes (Newton-Raphson
  on groups of curves, chained across dependent groups)
- Pricing linear rates instruments (deposits, FRAs, OIS and Ibor swaps)
- Computing curve-parameter sensitivities by backward sweep
- Converting them into sensitivities to the calibrating market quotes

Scope: linear products only; curves on continuously compounded zero rates.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, Conventions, year_fraction
from .dates import DateUtils, ScheduleInfo
from .errors import (
    CurveLibError,
    UnboundCurrency,
    UnboundIndex,
    CalibrationError,
    UnderOrOverDetermined,
    MaxStepsExceeded,
    SingularJacobian,
)
from .indices import Currency, IborIndex, OvernightIndex

# Curves
from .curves import (
    InterpolatedCurve,
    CurveGenerator,
    Extrapolation,
    LinearInterpolator,
    CubicSplineInterpolator,
    LogLinearInterpolator,
)

# Market state
from .provider import CurveProvider
from .sensitivity import ForwardSensitivity, CurveSensitivity, ParameterSensitivity

# Instruments
from .instruments import Instrument, CalibrationInstrument

# Pricers
from .pricers import price, curve_sensitivity, par_rate, price_portfolio

# Calibration
from .calibration import (
    calibrate,
    CalibrationBlock,
    CalibrationConfig,
    CalibrationConvention,
    CurveBuildingResult,
    CurveSpec,
    JacobianBundle,
    UnitSpec,
)

# Risk
from .risk import (
    market_quote_sensitivity,
    MarketQuoteSensitivityCalculator,
    ParameterBumpEngine,
    QuoteBumpEngine,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "Conventions",
    "year_fraction",
    # Dates
    "DateUtils",
    "ScheduleInfo",
    # Errors
    "CurveLibError",
    "UnboundCurrency",
    "UnboundIndex",
    "CalibrationError",
    "UnderOrOverDetermined",
    "MaxStepsExceeded",
    "SingularJacobian",
    # Identifiers
    "Currency",
    "IborIndex",
    "OvernightIndex",
    # Curves
    "InterpolatedCurve",
    "CurveGenerator",
    "Extrapolation",
    "LinearInterpolator",
    "CubicSplineInterpolator",
    "LogLinearInterpolator",
    # Market state
    "CurveProvider",
    "ForwardSensitivity",
    "CurveSensitivity",
    "ParameterSensitivity",
    # Instruments
    "Instrument",
    "CalibrationInstrument",
    # Pricers
    "price",
    "curve_sensitivity",
    "par_rate",
    "price_portfolio",
    # Calibration
    "calibrate",
    "CalibrationBlock",
    "CalibrationConfig",
    "CalibrationConvention",
    "CurveBuildingResult",
    "CurveSpec",
    "JacobianBundle",
    "UnitSpec",
    # Risk
    "market_quote_sensitivity",
    "MarketQuoteSensitivityCalculator",
    "ParameterBumpEngine",
    "QuoteBumpEngine",
]
