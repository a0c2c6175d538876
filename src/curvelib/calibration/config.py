"""
Calibration settings.

Provides:
- CalibrationConvention: which residual a unit drives to zero
- ConvergenceTest: which stopping rule the Newton iteration applies
- CalibrationConfig: tolerances, step cap and worker count
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional, Union


class CalibrationConvention(Enum):
    """
    Residual used by a calibration unit.

    PAR_RATE: quote - par rate of the instrument
    PRESENT_VALUE: present value of the instrument struck at the quote
    """
    PAR_RATE = "par_rate"
    PRESENT_VALUE = "present_value"

    @classmethod
    def from_string(cls, s: Union[str, "CalibrationConvention"]) -> "CalibrationConvention":
        """Parse calibration convention from string representation."""
        if isinstance(s, cls):
            return s
        mapping = {
            "PAR_RATE": cls.PAR_RATE,
            "PARRATE": cls.PAR_RATE,
            "PAR_SPREAD": cls.PAR_RATE,
            "PARSPREAD": cls.PAR_RATE,
            "PRESENT_VALUE": cls.PRESENT_VALUE,
            "PRESENTVALUE": cls.PRESENT_VALUE,
            "PV": cls.PRESENT_VALUE,
        }
        key = s.upper().strip().replace(" ", "_").replace("-", "_")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown calibration convention: {s}")


class ConvergenceTest(Enum):
    """Stopping rule of the Newton iteration."""
    ABSOLUTE = "absolute"    # max |r| < tolerance_abs
    RELATIVE = "relative"    # max |delta_i / x_i| < tolerance_rel
    ANY = "any"              # either of the above

    @classmethod
    def from_string(cls, s: Union[str, "ConvergenceTest"]) -> "ConvergenceTest":
        """Parse convergence test from string representation."""
        if isinstance(s, cls):
            return s
        key = s.lower().strip()
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown convergence test: {s}")


@dataclass(frozen=True)
class CalibrationConfig:
    """
    Newton-Raphson calibration settings.

    Attributes:
        tolerance_abs: Root tolerance on the residuals
        tolerance_rel: Tolerance on the relative parameter step
        max_steps: Step cap; exceeding it raises MaxStepsExceeded
        convergence: Stopping rule
        max_condition: Condition number above which the Jacobian is singular
        max_workers: Threads for residual/Jacobian row evaluation (None = sequential)
    """
    tolerance_abs: float = 1e-10
    tolerance_rel: float = 1e-10
    max_steps: int = 100
    convergence: ConvergenceTest = ConvergenceTest.ANY
    max_condition: float = 1e14
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.tolerance_abs <= 0 or self.tolerance_rel <= 0:
            raise ValueError("Tolerances must be positive")
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")
        object.__setattr__(self, "convergence", ConvergenceTest.from_string(self.convergence))

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "CalibrationConfig":
        """Build from a plain mapping; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown calibration settings: {sorted(unknown)}")
        return cls(**config)

    def converged(self, max_residual: float, max_relative_step: float) -> bool:
        """Apply the stopping rule."""
        abs_ok = max_residual < self.tolerance_abs
        rel_ok = max_relative_step < self.tolerance_rel
        if self.convergence == ConvergenceTest.ABSOLUTE:
            return abs_ok
        if self.convergence == ConvergenceTest.RELATIVE:
            return rel_ok
        return abs_ok or rel_ok


__all__ = [
    "CalibrationConvention",
    "ConvergenceTest",
    "CalibrationConfig",
]
