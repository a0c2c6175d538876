"""
Curve provider: the market state seen by pricing, risk and calibration.

Provides a named collection of curves plus:
- currency -> discounting curve bindings
- index -> forward curve bindings

Providers are immutable snapshots. Adding or replacing curves returns a new
provider sharing the unchanged curve objects; every provider carries a
unique, increasing version number that callers can use as a cache key.
"""

import itertools
from typing import Dict, Iterable, List, Mapping, Optional, Union

import numpy as np

from .curves.curve import InterpolatedCurve
from .errors import UnboundCurrency, UnboundIndex
from .indices import Currency, IborIndex, OvernightIndex
from .sensitivity import CurveSensitivity, ParameterSensitivity

Index = Union[IborIndex, OvernightIndex]

_versions = itertools.count(1)


class CurveProvider:
    """
    Read-only view over a set of curves and their bindings.

    Attributes:
        version: Unique snapshot number (increases with every new provider)
    """

    def __init__(
        self,
        curves: Optional[Mapping[str, InterpolatedCurve]] = None,
        currencies: Optional[Mapping[Currency, str]] = None,
        indices: Optional[Mapping[Index, str]] = None
    ):
        self._curves: Dict[str, InterpolatedCurve] = dict(curves or {})
        self._currencies: Dict[Currency, str] = dict(currencies or {})
        self._indices: Dict[Index, str] = dict(indices or {})
        for key, name in list(self._currencies.items()) + list(self._indices.items()):
            if name not in self._curves:
                raise ValueError(f"{key} is bound to unknown curve {name}")
        self.version = next(_versions)

    # Lookups

    @property
    def curve_names(self) -> List[str]:
        return list(self._curves)

    @property
    def currencies(self) -> Dict[Currency, str]:
        return dict(self._currencies)

    @property
    def indices(self) -> Dict[Index, str]:
        return dict(self._indices)

    def curve(self, name: str) -> InterpolatedCurve:
        """Curve by name; KeyError if absent."""
        try:
            return self._curves[name]
        except KeyError:
            raise KeyError(f"No curve named {name}") from None

    def has_curve(self, name: str) -> bool:
        return name in self._curves

    def curve_name(self, key: Union[Currency, Index]) -> str:
        """Name of the curve bound to a currency or an index."""
        if isinstance(key, Currency):
            if key not in self._currencies:
                raise UnboundCurrency(key)
            return self._currencies[key]
        if key not in self._indices:
            raise UnboundIndex(key)
        return self._indices[key]

    def discounting_curve(self, currency: Currency) -> InterpolatedCurve:
        return self._curves[self.curve_name(currency)]

    def forward_curve(self, index: Index) -> InterpolatedCurve:
        return self._curves[self.curve_name(index)]

    # Market queries

    def discount_factor(self, currency: Currency, t: float) -> float:
        """Discount factor P(0,t) from the curve bound to the currency."""
        return self.discounting_curve(currency).discount_factor(t)

    def forward_rate(self, index: Index, start: float, end: float, accrual_factor: float) -> float:
        """
        Simple forward rate of an index over [start, end].

        (P(start) / P(end) - 1) / accrual_factor on the index curve.
        """
        return self.forward_curve(index).forward_rate(start, end, accrual_factor)

    # Snapshots

    def with_curves(
        self,
        curves: Union[Mapping[str, InterpolatedCurve], Iterable[InterpolatedCurve]],
        currencies: Optional[Mapping[Currency, str]] = None,
        indices: Optional[Mapping[Index, str]] = None
    ) -> "CurveProvider":
        """
        New provider with curves added or replaced and bindings added or overwritten.

        Args:
            curves: Curves by name, or an iterable of curves (keyed by their name)
            currencies: Extra currency bindings
            indices: Extra index bindings
        """
        if not isinstance(curves, Mapping):
            curves = {c.name: c for c in curves}
        new_curves = dict(self._curves)
        new_curves.update(curves)
        new_currencies = dict(self._currencies)
        new_currencies.update(currencies or {})
        new_indices = dict(self._indices)
        new_indices.update(indices or {})
        return CurveProvider(new_curves, new_currencies, new_indices)

    def bind_currency(self, currency: Currency, curve_name: str) -> "CurveProvider":
        return self.with_curves({}, currencies={currency: curve_name})

    def bind_index(self, index: Index, curve_name: str) -> "CurveProvider":
        return self.with_curves({}, indices={index: curve_name})

    def merged(self, other: "CurveProvider") -> "CurveProvider":
        """New provider with the curves and bindings of other layered on top."""
        return self.with_curves(other._curves, other._currencies, other._indices)

    # Sensitivities

    def parameter_sensitivity(self, sensitivity: CurveSensitivity) -> ParameterSensitivity:
        """
        Convert point sensitivities into sensitivities to curve parameters.

        Discounting points (t, v) contribute v * dz(t)/dp; forward points
        contribute v * dF/dp for the simple forward of their period.
        """
        result: Dict[str, np.ndarray] = {}

        for name, points in sensitivity.discounting.items():
            curve = self.curve(name)
            vec = result.setdefault(name, np.zeros(curve.n_parameters))
            for t, value in points:
                vec += value * curve.parameter_sensitivity(t)

        for name, points in sensitivity.forward.items():
            curve = self.curve(name)
            vec = result.setdefault(name, np.zeros(curve.n_parameters))
            for fwd in points:
                vec += fwd.value * curve.forward_rate_parameter_sensitivity(
                    fwd.start, fwd.end, fwd.accrual_factor
                )

        return ParameterSensitivity(result)

    def __repr__(self) -> str:
        return f"CurveProvider(version={self.version}, curves={self.curve_names})"


__all__ = [
    "CurveProvider",
]
