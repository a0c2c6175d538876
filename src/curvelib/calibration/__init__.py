"""
Calibration package - multi-curve construction by Newton-Raphson.

Provides:
- CurveSpec / UnitSpec: what to calibrate
- CalibrationUnit: joint Newton solve of a group of curves
- CalibrationBlock: ordered units with chained quote Jacobians
- calibrate: entry point returning (provider, bundle)
"""

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from ..provider import CurveProvider
from .block import CalibrationBlock, CurveBuildingResult
from .bundle import CurveJacobian, JacobianBundle
from .config import CalibrationConfig, CalibrationConvention, ConvergenceTest
from .unit import CalibrationUnit, CurveSpec, UnitSpec, UnitState


def calibrate(
    units: Union[UnitSpec, Sequence[UnitSpec]],
    known: Optional[CurveProvider] = None,
    quotes: Optional[Mapping[str, float]] = None,
    config: Optional[Union[CalibrationConfig, Dict[str, Any]]] = None,
    known_bundle: Optional[JacobianBundle] = None
) -> CurveBuildingResult:
    """
    Calibrate a block of units.

    Args:
        units: Unit definitions in dependency order (or a single unit)
        known: Provider with externally supplied curves
        quotes: Market quotes by quote id, overriding the instruments' own quotes
        config: CalibrationConfig or a mapping of its fields
        known_bundle: Quote Jacobians of known curves from an earlier block

    Returns:
        CurveBuildingResult (provider, bundle)

    Raises:
        ValueError: Unknown or duplicate quote ids
        CalibrationError: Calibration failure
    """
    if isinstance(units, UnitSpec):
        units = [units]
    units = list(units)

    if quotes:
        instrument_ids = {qid for spec in units for qid in spec.quote_ids}
        unknown = sorted(set(quotes) - instrument_ids)
        if unknown:
            raise ValueError(f"Quotes for unknown instruments: {unknown}")
        units = [spec.with_quotes(quotes) for spec in units]

    if isinstance(config, Mapping):
        config = CalibrationConfig.from_dict(dict(config))

    return CalibrationBlock(units, known, config, known_bundle).run()


__all__ = [
    "calibrate",
    "CalibrationBlock",
    "CurveBuildingResult",
    "CurveJacobian",
    "JacobianBundle",
    "CalibrationConfig",
    "CalibrationConvention",
    "ConvergenceTest",
    "CalibrationUnit",
    "CurveSpec",
    "UnitSpec",
    "UnitState",
]
