"""
Sensitivity containers.

Provides:
- ForwardSensitivity: sensitivity to a simple forward rate over a period
- CurveSensitivity: point sensitivities per curve name, to zero rates at
  given times (discounting) and to forward rates (forward)
- ParameterSensitivity: per curve name, a vector of sensitivities to the
  curve parameters

Point sensitivities are what an instrument's backward sweep produces; a
CurveProvider turns them into parameter sensitivities through the
interpolation weights of the curves involved.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class ForwardSensitivity:
    """
    Sensitivity to the simple forward rate over [start, end].

    Attributes:
        start: Period start time
        end: Period end time
        accrual_factor: Accrual factor used to define the forward
        value: d(value) / d(forward rate)
    """
    start: float
    end: float
    accrual_factor: float
    value: float

    def scaled(self, factor: float) -> "ForwardSensitivity":
        return ForwardSensitivity(self.start, self.end, self.accrual_factor, self.value * factor)


@dataclass
class CurveSensitivity:
    """
    Point sensitivities of a value to the curves it was computed from.

    Attributes:
        discounting: curve name -> list of (time, d(value)/d(zero rate at time))
        forward: curve name -> list of ForwardSensitivity
    """
    discounting: Dict[str, List[Tuple[float, float]]] = field(default_factory=dict)
    forward: Dict[str, List[ForwardSensitivity]] = field(default_factory=dict)

    @classmethod
    def of_discounting(cls, curve_name: str, time: float, value: float) -> "CurveSensitivity":
        return cls(discounting={curve_name: [(time, value)]})

    @classmethod
    def of_forward(cls, curve_name: str, sensitivity: ForwardSensitivity) -> "CurveSensitivity":
        return cls(forward={curve_name: [sensitivity]})

    @property
    def curve_names(self) -> List[str]:
        names = list(self.discounting)
        names.extend(n for n in self.forward if n not in self.discounting)
        return names

    def plus(self, other: "CurveSensitivity") -> "CurveSensitivity":
        """Concatenate the point lists of both sensitivities, curve by curve."""
        discounting = {k: list(v) for k, v in self.discounting.items()}
        for name, points in other.discounting.items():
            discounting.setdefault(name, []).extend(points)
        forward = {k: list(v) for k, v in self.forward.items()}
        for name, points in other.forward.items():
            forward.setdefault(name, []).extend(points)
        return CurveSensitivity(discounting, forward)

    def multiplied_by(self, factor: float) -> "CurveSensitivity":
        return CurveSensitivity(
            {k: [(t, v * factor) for t, v in pts] for k, pts in self.discounting.items()},
            {k: [s.scaled(factor) for s in pts] for k, pts in self.forward.items()},
        )

    def __add__(self, other: "CurveSensitivity") -> "CurveSensitivity":
        return self.plus(other)

    def __mul__(self, factor: float) -> "CurveSensitivity":
        return self.multiplied_by(factor)

    __rmul__ = __mul__

    def __neg__(self) -> "CurveSensitivity":
        return self.multiplied_by(-1.0)


class ParameterSensitivity(Mapping[str, np.ndarray]):
    """
    Sensitivity to curve parameters: curve name -> vector.

    Supports pointwise addition (a curve missing on one side counts as zero)
    and scalar multiplication. Vectors are copied on construction.
    """

    def __init__(self, sensitivities: Mapping[str, np.ndarray] = None):
        self._data: Dict[str, np.ndarray] = {
            name: np.array(vec, dtype=np.float64)
            for name, vec in (sensitivities or {}).items()
        }

    def __getitem__(self, name: str) -> np.ndarray:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def plus(self, other: "ParameterSensitivity") -> "ParameterSensitivity":
        result = dict(self._data)
        for name, vec in other.items():
            if name in result:
                if result[name].shape != vec.shape:
                    raise ValueError(
                        f"Sensitivity to curve {name} has inconsistent length: "
                        f"{len(result[name])} vs {len(vec)}"
                    )
                result[name] = result[name] + vec
            else:
                result[name] = vec
        return ParameterSensitivity(result)

    def multiplied_by(self, factor: float) -> "ParameterSensitivity":
        return ParameterSensitivity({name: vec * factor for name, vec in self._data.items()})

    def __add__(self, other: "ParameterSensitivity") -> "ParameterSensitivity":
        return self.plus(other)

    def __sub__(self, other: "ParameterSensitivity") -> "ParameterSensitivity":
        return self.plus(other.multiplied_by(-1.0))

    def __mul__(self, factor: float) -> "ParameterSensitivity":
        return self.multiplied_by(factor)

    __rmul__ = __mul__

    def __neg__(self) -> "ParameterSensitivity":
        return self.multiplied_by(-1.0)

    def allclose(self, other: "ParameterSensitivity", atol: float = 1e-8) -> bool:
        """Compare curve by curve, treating missing curves as zero vectors."""
        for name in set(self) | set(other):
            a = self._data.get(name)
            b = other.get(name)
            if a is None:
                a = np.zeros_like(b)
            if b is None:
                b = np.zeros_like(a)
            if a.shape != b.shape or not np.allclose(a, b, rtol=0.0, atol=atol):
                return False
        return True

    def to_frame(self) -> pd.DataFrame:
        """Long table with one row per (curve, parameter index)."""
        rows = [
            {"curve": name, "parameter": i, "sensitivity": float(v)}
            for name, vec in self._data.items()
            for i, v in enumerate(vec)
        ]
        return pd.DataFrame(rows, columns=["curve", "parameter", "sensitivity"])

    def __repr__(self) -> str:
        return f"ParameterSensitivity({ {k: v.tolist() for k, v in self._data.items()} })"


__all__ = [
    "ForwardSensitivity",
    "CurveSensitivity",
    "ParameterSensitivity",
]
