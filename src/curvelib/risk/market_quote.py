"""
Market-quote sensitivities.

Converts sensitivities to curve parameters into sensitivities to the market
quotes the curves were calibrated from:

    dPV/dq = sum over curves c of  dPV/dp_c . dp_c/dq

using the JacobianBundle of the calibration block. Curves without an entry
in the bundle (externally supplied curves) carry no quote risk.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from ..calibration.bundle import JacobianBundle
from ..instruments.base import Instrument
from ..parallel import map_ordered
from ..pricers.dispatcher import curve_sensitivity
from ..provider import CurveProvider
from ..sensitivity import ParameterSensitivity

logger = logging.getLogger(__name__)


def market_quote_sensitivity(
    parameter_sensitivity: ParameterSensitivity,
    bundle: JacobianBundle
) -> Dict[str, float]:
    """
    Sensitivity to each market quote of the bundle.

    Args:
        parameter_sensitivity: Sensitivity to curve parameters
        bundle: Quote Jacobians of the calibrated curves

    Returns:
        Quote id -> sensitivity, in the bundle's quote order
    """
    result = {qid: 0.0 for qid in bundle.quote_ids}

    for name, vec in parameter_sensitivity.items():
        if name not in bundle:
            logger.debug("Curve %s has no quote Jacobian; skipped", name)
            continue
        jac = bundle[name]
        if len(vec) != jac.n_parameters:
            raise ValueError(
                f"Sensitivity to curve {name} has {len(vec)} entries, "
                f"its Jacobian has {jac.n_parameters} parameters"
            )
        contribution = np.asarray(vec) @ jac.matrix
        for qid, value in zip(jac.quote_ids, contribution):
            result[qid] += float(value)

    return result


def market_quote_sensitivity_frame(
    parameter_sensitivity: ParameterSensitivity,
    bundle: JacobianBundle
) -> pd.Series:
    """Market-quote sensitivities as a Series indexed by quote id."""
    sens = market_quote_sensitivity(parameter_sensitivity, bundle)
    return pd.Series(sens, name="market_quote_sensitivity", dtype=float)


class MarketQuoteSensitivityCalculator:
    """
    Present-value sensitivity to market quotes for instruments and portfolios.

    Attributes:
        provider: Calibrated provider
        bundle: Quote Jacobians of the block that produced the provider
        max_workers: Threads for portfolio evaluation (None = sequential)
    """

    def __init__(self, provider: CurveProvider, bundle: JacobianBundle, max_workers: Optional[int] = None):
        self.provider = provider
        self.bundle = bundle
        self.max_workers = max_workers

    def calculate(self, instrument: Instrument) -> Dict[str, float]:
        return market_quote_sensitivity(curve_sensitivity(instrument, self.provider), self.bundle)

    def calculate_portfolio(self, instruments: Sequence[Instrument]) -> Dict[str, float]:
        """Summed sensitivities; parameter sensitivities are evaluated in parallel."""
        sensitivities = map_ordered(
            lambda inst: curve_sensitivity(inst, self.provider),
            instruments,
            self.max_workers,
        )
        total = ParameterSensitivity()
        for sens in sensitivities:
            total = total + sens
        return market_quote_sensitivity(total, self.bundle)


__all__ = [
    "market_quote_sensitivity",
    "market_quote_sensitivity_frame",
    "MarketQuoteSensitivityCalculator",
]
