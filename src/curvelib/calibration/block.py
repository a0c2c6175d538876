"""
Calibration block: an ordered sequence of units.

Unit k treats every curve solved by units 0..k-1 (plus any externally
supplied curves) as known. After each unit converges, its quote Jacobian is
chained through the Jacobians of its known curves, so the bundle of the
block attributes every solved parameter to the original market quotes of
all the units it depends on.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..provider import CurveProvider
from .bundle import JacobianBundle
from .config import CalibrationConfig
from .unit import CalibrationUnit, UnitSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveBuildingResult:
    """
    Output of a calibration block.

    Attributes:
        provider: Known curves plus all calibrated curves
        bundle: Quote Jacobians of the calibrated curves (and of known_bundle)
        steps: Newton steps used by each unit
    """
    provider: CurveProvider
    bundle: JacobianBundle
    steps: tuple = ()

    def __iter__(self):
        # Allows `provider, bundle = result`
        return iter((self.provider, self.bundle))


class CalibrationBlock:
    """
    Runs calibration units in order.

    Args:
        units: Unit definitions, in dependency order
        known: Provider with externally supplied curves
        config: Calibration settings shared by all units
        known_bundle: Quote Jacobians of known curves from an earlier block
    """

    def __init__(
        self,
        units: Sequence[UnitSpec],
        known: Optional[CurveProvider] = None,
        config: Optional[CalibrationConfig] = None,
        known_bundle: Optional[JacobianBundle] = None
    ):
        self.units = list(units)
        self.known = known if known is not None else CurveProvider()
        self.config = config or CalibrationConfig()
        self.known_bundle = known_bundle if known_bundle is not None else JacobianBundle()
        self._validate()

    def _validate(self) -> None:
        names: List[str] = []
        quote_ids: List[str] = list(self.known_bundle.quote_ids)
        for spec in self.units:
            names.extend(spec.curve_names)
            quote_ids.extend(spec.quote_ids)

        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Curves calibrated by more than one unit: {duplicates}")

        duplicates = sorted({q for q in quote_ids if quote_ids.count(q) > 1})
        if duplicates:
            raise ValueError(f"Duplicate quote ids in calibration block: {duplicates}")

    def run(self) -> CurveBuildingResult:
        """
        Calibrate all units.

        Returns:
            CurveBuildingResult with the final provider and Jacobian bundle

        Raises:
            CalibrationError: If any unit fails; no partial result is returned
        """
        provider = self.known
        bundle = self.known_bundle
        steps = []

        for spec in self.units:
            unit = CalibrationUnit(spec, provider, self.config)
            provider = unit.calibrate()
            bundle = bundle.merged(unit.quote_jacobians(bundle))
            steps.append(unit.steps)

        logger.info(
            "Calibrated %d units (%d curves) in %d Newton steps",
            len(self.units), sum(len(s.curves) for s in self.units), sum(steps),
        )
        return CurveBuildingResult(provider, bundle, tuple(steps))


__all__ = [
    "CurveBuildingResult",
    "CalibrationBlock",
]
