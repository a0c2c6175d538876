"""
Instruments package - priced and calibrating instruments.

Provides:
- Instrument / CalibrationInstrument: the contracts used by pricing and calibration
- Coupons (fixed, Ibor, OIS), deposits, FRAs and fixed-vs-floating swaps
- Generators building instruments from dates, tenors and quotes
"""

from .base import Instrument, CalibrationInstrument
from .payments import (
    CouponFixed,
    CouponIbor,
    CouponOIS,
    CashDeposit,
    IborFixingDeposit,
    ForwardRateAgreement,
)
from .swaps import FixedCouponSwap
from .generators import (
    InstrumentGenerator,
    DepositONGenerator,
    IborDepositGenerator,
    FRAGenerator,
    OISSwapGenerator,
    FixedIborSwapGenerator,
)

__all__ = [
    "Instrument",
    "CalibrationInstrument",
    "CouponFixed",
    "CouponIbor",
    "CouponOIS",
    "CashDeposit",
    "IborFixingDeposit",
    "ForwardRateAgreement",
    "FixedCouponSwap",
    "InstrumentGenerator",
    "DepositONGenerator",
    "IborDepositGenerator",
    "FRAGenerator",
    "OISSwapGenerator",
    "FixedIborSwapGenerator",
]
