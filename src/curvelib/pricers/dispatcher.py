"""
Instrument-level pricing and risk dispatch.

Every instrument implements the Instrument contract, so dispatch is a call
on the contract: present value, point sensitivities converted to parameter
sensitivities by the provider, and par rates for calibration instruments.
Portfolio helpers evaluate independent instruments on a worker pool against
one read-only provider snapshot.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..instruments.base import CalibrationInstrument, Instrument
from ..parallel import map_ordered
from ..provider import CurveProvider
from ..sensitivity import ParameterSensitivity


@dataclass
class PricerOutput:
    """Container for pricing outputs to keep return type consistent."""

    instrument_type: str
    pv: float
    sensitivity: ParameterSensitivity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "instrument_type": self.instrument_type,
            "pv": self.pv,
            **{name: vec.tolist() for name, vec in self.sensitivity.items()},
        }


def price(instrument: Instrument, provider: CurveProvider) -> float:
    """Present value of an instrument."""
    return instrument.present_value(provider)


def curve_sensitivity(instrument: Instrument, provider: CurveProvider) -> ParameterSensitivity:
    """Sensitivity of the present value to the parameters of every curve it touches."""
    return provider.parameter_sensitivity(instrument.present_value_curve_sensitivity(provider))


def par_rate(instrument: CalibrationInstrument, provider: CurveProvider) -> float:
    """Quote at which a calibration instrument has zero present value."""
    return instrument.par_rate(provider)


def par_rate_sensitivity(instrument: CalibrationInstrument, provider: CurveProvider) -> ParameterSensitivity:
    """Sensitivity of the par rate to curve parameters."""
    return provider.parameter_sensitivity(instrument.par_rate_curve_sensitivity(provider))


def price_trade(instrument: Instrument, provider: CurveProvider) -> PricerOutput:
    """Present value and parameter sensitivity in one output."""
    return PricerOutput(
        instrument_type=type(instrument).__name__,
        pv=price(instrument, provider),
        sensitivity=curve_sensitivity(instrument, provider),
    )


def price_portfolio(
    instruments: Sequence[Instrument],
    provider: CurveProvider,
    max_workers: Optional[int] = None
) -> List[float]:
    """Present values of a portfolio, in input order."""
    return map_ordered(lambda inst: price(inst, provider), instruments, max_workers)


def curve_sensitivity_portfolio(
    instruments: Sequence[Instrument],
    provider: CurveProvider,
    max_workers: Optional[int] = None
) -> ParameterSensitivity:
    """Summed parameter sensitivity of a portfolio."""
    total = ParameterSensitivity()
    for sens in map_ordered(lambda inst: curve_sensitivity(inst, provider), instruments, max_workers):
        total = total + sens
    return total


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
