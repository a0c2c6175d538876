"""
Calibration unit: a group of curves solved jointly by Newton-Raphson.

A unit takes a provider holding the curves already known, builds the curves
it solves from a parameter vector, and drives the residuals of its
calibration instruments to zero:

    r(x) = 0,   J(x) = dr/dx from the instruments' backward sweeps,
    J delta = -r,   x <- x + delta

At the converged point the implicit function theorem gives the sensitivity
of the solved parameters to the unit's quotes and, through the Jacobians of
the known curves, to every earlier quote of the block:

    dx/dq_own  = -J^-1 diag(dr/dq)
    dx/dq_prev = -J^-1 (dr/dp_known) (dp_known/dq_prev)
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.linalg

from ..curves.curve import CurveGenerator, InterpolatedCurve
from ..errors import MaxStepsExceeded, SingularJacobian, UnderOrOverDetermined
from ..indices import Currency, IborIndex, OvernightIndex
from ..instruments.base import CalibrationInstrument
from ..parallel import map_ordered
from ..provider import CurveProvider
from ..sensitivity import ParameterSensitivity
from .bundle import CurveJacobian, JacobianBundle
from .config import CalibrationConfig, CalibrationConvention

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveSpec:
    """
    Definition of one curve to calibrate.

    Attributes:
        name: Curve name
        instruments: Calibration instruments (sorted by maturity on construction)
        generator: Interpolation setup of the curve
        currencies: Currencies discounted on this curve
        indices: Indices projected on this curve
        node_times: Explicit node times (defaults to instrument maturities)
    """
    name: str
    instruments: Tuple[CalibrationInstrument, ...]
    generator: CurveGenerator = field(default_factory=CurveGenerator)
    currencies: Tuple[Currency, ...] = ()
    indices: Tuple[Union[IborIndex, OvernightIndex], ...] = ()
    node_times: Optional[Tuple[float, ...]] = None

    def __post_init__(self):
        ordered = tuple(sorted(self.instruments, key=lambda inst: inst.maturity_time))
        object.__setattr__(self, "instruments", ordered)
        object.__setattr__(self, "currencies", tuple(self.currencies))
        object.__setattr__(self, "indices", tuple(self.indices))
        if self.node_times is not None:
            object.__setattr__(self, "node_times", tuple(float(t) for t in self.node_times))

    @property
    def times(self) -> np.ndarray:
        if self.node_times is not None:
            return np.array(self.node_times)
        return np.array([inst.maturity_time for inst in self.instruments])

    @property
    def n_parameters(self) -> int:
        return len(self.times)

    def with_quotes(self, quotes: Mapping[str, float]) -> "CurveSpec":
        """Copy with the instruments whose quote id is in quotes re-struck."""
        instruments = tuple(
            inst.with_quote(quotes[inst.quote_id]) if inst.quote_id in quotes else inst
            for inst in self.instruments
        )
        return replace(self, instruments=instruments)


@dataclass(frozen=True)
class UnitSpec:
    """
    Curves solved jointly and the residual convention they use.

    Attributes:
        curves: Curve definitions, in parameter order
        convention: Residual convention (CalibrationConvention or its name)
        name: Label used in logs and errors
    """
    curves: Tuple[CurveSpec, ...]
    convention: CalibrationConvention = CalibrationConvention.PAR_RATE
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "curves", tuple(self.curves))
        object.__setattr__(self, "convention", CalibrationConvention.from_string(self.convention))
        if self.name is None:
            object.__setattr__(self, "name", "+".join(c.name for c in self.curves))

    @property
    def instruments(self) -> List[CalibrationInstrument]:
        return [inst for curve in self.curves for inst in curve.instruments]

    @property
    def quote_ids(self) -> List[str]:
        return [inst.quote_id for inst in self.instruments]

    @property
    def curve_names(self) -> List[str]:
        return [curve.name for curve in self.curves]

    def with_quotes(self, quotes: Mapping[str, float]) -> "UnitSpec":
        return replace(self, curves=tuple(c.with_quotes(quotes) for c in self.curves))


class UnitState(Enum):
    """Lifecycle of a calibration unit."""
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    FAILED = "failed"


class CalibrationUnit:
    """
    Newton-Raphson solver for one unit.

    Attributes:
        spec: Unit definition
        known: Provider with the curves the unit treats as fixed
        config: Calibration settings
        state: Current UnitState
        parameters: Current parameter vector (all solved curves, concatenated)
        steps: Newton steps performed
    """

    def __init__(
        self,
        spec: UnitSpec,
        known: Optional[CurveProvider] = None,
        config: Optional[CalibrationConfig] = None
    ):
        self.spec = spec
        self.known = known if known is not None else CurveProvider()
        self.config = config or CalibrationConfig()

        n_parameters = sum(curve.n_parameters for curve in spec.curves)
        n_instruments = len(spec.instruments)
        if n_parameters == 0 or n_instruments == 0 or n_parameters != n_instruments:
            raise UnderOrOverDetermined(n_parameters, n_instruments, spec.name)
        for curve in spec.curves:
            if curve.n_parameters == 0:
                raise UnderOrOverDetermined(0, len(curve.instruments), f"{spec.name} (curve {curve.name})")

        self._sizes = [curve.n_parameters for curve in spec.curves]
        self._offsets = np.concatenate([[0], np.cumsum(self._sizes)]).astype(int)

        self.state = UnitState.INITIALIZED
        self.parameters = np.array([inst.initial_guess() for inst in spec.instruments], dtype=np.float64)
        self.steps = 0
        self.residuals: Optional[np.ndarray] = None
        self.provider: Optional[CurveProvider] = None
        self._rows: List[ParameterSensitivity] = []
        self._jacobian: Optional[np.ndarray] = None

    # Model

    def build_provider(self, parameters: np.ndarray) -> CurveProvider:
        """Known provider plus the unit curves built from the parameter vector."""
        curves: Dict[str, InterpolatedCurve] = {}
        currencies = {}
        indices = {}
        for k, curve_spec in enumerate(self.spec.curves):
            params = parameters[self._offsets[k]:self._offsets[k + 1]]
            curves[curve_spec.name] = curve_spec.generator.generate(curve_spec.name, curve_spec.times, params)
            currencies.update({ccy: curve_spec.name for ccy in curve_spec.currencies})
            indices.update({idx: curve_spec.name for idx in curve_spec.indices})
        return self.known.with_curves(curves, currencies, indices)

    def _residual_row(self, instrument: CalibrationInstrument, provider: CurveProvider):
        """Residual and its parameter sensitivity for one instrument."""
        if self.spec.convention == CalibrationConvention.PAR_RATE:
            residual = instrument.quote - instrument.par_rate(provider)
            sensitivity = instrument.par_rate_curve_sensitivity(provider).multiplied_by(-1.0)
        else:
            residual = instrument.present_value(provider)
            sensitivity = instrument.present_value_curve_sensitivity(provider)
        return residual, provider.parameter_sensitivity(sensitivity)

    def _quote_derivative(self, instrument: CalibrationInstrument, provider: CurveProvider) -> float:
        """d(residual) / d(quote)."""
        if self.spec.convention == CalibrationConvention.PAR_RATE:
            return 1.0
        return instrument.present_value_quote_sensitivity(provider)

    def _evaluate(self, provider: CurveProvider) -> Tuple[np.ndarray, np.ndarray]:
        rows = map_ordered(
            lambda inst: self._residual_row(inst, provider),
            self.spec.instruments,
            self.config.max_workers,
        )
        residuals = np.array([r for r, _ in rows])
        self._rows = [sens for _, sens in rows]
        jacobian = np.vstack([self._solved_row(sens) for sens in self._rows])
        return residuals, jacobian

    def _solved_row(self, sensitivity: ParameterSensitivity) -> np.ndarray:
        row = np.zeros(self._offsets[-1])
        for k, curve_spec in enumerate(self.spec.curves):
            if curve_spec.name in sensitivity:
                row[self._offsets[k]:self._offsets[k + 1]] = sensitivity[curve_spec.name]
        return row

    def _check_conditioning(self, jacobian: np.ndarray) -> None:
        condition = np.linalg.cond(jacobian)
        if not np.isfinite(condition) or condition > self.config.max_condition:
            self.state = UnitState.FAILED
            raise SingularJacobian(
                f"Residual Jacobian of unit {self.spec.name} is singular "
                f"(condition number {condition:.3e}); check for duplicate or "
                f"non-calibrating instruments",
                condition=condition,
            )

    # Solve

    def calibrate(self) -> CurveProvider:
        """
        Run the Newton iteration.

        Returns:
            Provider with the known curves and the calibrated unit curves

        Raises:
            MaxStepsExceeded: No convergence within config.max_steps
            SingularJacobian: The residual Jacobian cannot be inverted
        """
        self.state = UnitState.ITERATING
        x = self.parameters.copy()
        provider = self.build_provider(x)
        residuals, jacobian = self._evaluate(provider)
        max_relative_step = np.inf
        self.steps = 0

        while not self.config.converged(float(np.max(np.abs(residuals))), max_relative_step):
            if self.steps >= self.config.max_steps:
                self.state = UnitState.FAILED
                self.parameters, self.residuals = x, residuals
                raise MaxStepsExceeded(self.steps, residuals, x)

            self._check_conditioning(jacobian)
            try:
                delta = scipy.linalg.solve(jacobian, -residuals)
            except scipy.linalg.LinAlgError as exc:
                self.state = UnitState.FAILED
                raise SingularJacobian(f"Linear solve failed in unit {self.spec.name}: {exc}") from exc

            x = x + delta
            self.steps += 1
            scale = np.where(x != 0.0, np.abs(x), 1.0)
            max_relative_step = float(np.max(np.abs(delta) / scale))

            provider = self.build_provider(x)
            residuals, jacobian = self._evaluate(provider)
            logger.debug(
                "Unit %s step %d: max |residual| = %.3e, max relative step = %.3e",
                self.spec.name, self.steps, np.max(np.abs(residuals)), max_relative_step,
            )

        self._check_conditioning(jacobian)
        self.parameters = x
        self.residuals = residuals
        self.provider = provider
        self._jacobian = jacobian
        self.state = UnitState.CONVERGED
        logger.info(
            "Unit %s converged in %d steps (max |residual| = %.3e)",
            self.spec.name, self.steps, np.max(np.abs(residuals)),
        )
        return provider

    def quote_jacobians(self, known_bundle: Optional[JacobianBundle] = None) -> Dict[str, CurveJacobian]:
        """
        Sensitivity of the solved parameters to market quotes.

        Columns are the quotes of known_bundle (earlier quotes, zero where a
        known curve does not depend on them) followed by the unit's own
        quotes. Known curves absent from known_bundle carry no quote risk.

        Args:
            known_bundle: Jacobians of the known curves

        Returns:
            Curve name -> CurveJacobian for every solved curve
        """
        if self.state != UnitState.CONVERGED:
            raise RuntimeError(f"Unit {self.spec.name} is {self.state.value}, not converged")

        known_bundle = known_bundle if known_bundle is not None else JacobianBundle()
        solved = set(self.spec.curve_names)
        own_ids = self.spec.quote_ids
        prev_ids = [qid for qid in known_bundle.quote_ids if qid not in own_ids]

        # dr/dq for the unit quotes
        d = np.array([self._quote_derivative(inst, self.provider) for inst in self.spec.instruments])
        rhs_own = np.diag(d)

        # dr/dq_prev through the known curves
        known_names = [
            name for name in known_bundle
            if name not in solved and any(name in row for row in self._rows)
        ]
        rhs_prev = np.zeros((len(own_ids), len(prev_ids)))
        if known_names and prev_ids:
            known_sizes = [known_bundle[name].n_parameters for name in known_names]
            dr_dknown = np.zeros((len(own_ids), sum(known_sizes)))
            offsets = np.concatenate([[0], np.cumsum(known_sizes)]).astype(int)
            for i, row in enumerate(self._rows):
                for k, name in enumerate(known_names):
                    if name in row:
                        dr_dknown[i, offsets[k]:offsets[k + 1]] = row[name]
            rhs_prev = dr_dknown @ known_bundle.stacked(known_names, prev_ids)

        rhs = np.hstack([rhs_prev, rhs_own])
        total = -scipy.linalg.solve(self._jacobian, rhs)

        quote_ids = tuple(prev_ids) + tuple(own_ids)
        return {
            curve_spec.name: CurveJacobian(total[self._offsets[k]:self._offsets[k + 1], :], quote_ids)
            for k, curve_spec in enumerate(self.spec.curves)
        }

    def __repr__(self) -> str:
        return f"CalibrationUnit(name={self.spec.name}, state={self.state.value}, steps={self.steps})"


__all__ = [
    "CurveSpec",
    "UnitSpec",
    "UnitState",
    "CalibrationUnit",
]
