"""
Jacobians of calibrated curve parameters with respect to market quotes.

Provides:
- CurveJacobian: matrix[i, j] = d(parameter i) / d(quote j) for one curve
- JacobianBundle: immutable curve name -> CurveJacobian mapping produced
  once per calibration block
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class CurveJacobian:
    """
    Sensitivity of one curve's parameters to market quotes.

    Attributes:
        matrix: Array of shape (n_parameters, n_quotes), read-only
        quote_ids: Quote identifiers labelling the columns
    """
    matrix: np.ndarray
    quote_ids: Tuple[str, ...]

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[1] != len(self.quote_ids):
            raise ValueError(
                f"Jacobian shape {matrix.shape} does not match {len(self.quote_ids)} quotes"
            )
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)
        object.__setattr__(self, "quote_ids", tuple(self.quote_ids))

    @property
    def n_parameters(self) -> int:
        return self.matrix.shape[0]


class JacobianBundle(Mapping[str, CurveJacobian]):
    """Read-only mapping of curve name to CurveJacobian."""

    def __init__(self, jacobians: Optional[Mapping[str, CurveJacobian]] = None):
        self._jacobians: Dict[str, CurveJacobian] = dict(jacobians or {})

    def __getitem__(self, name: str) -> CurveJacobian:
        return self._jacobians[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._jacobians)

    def __len__(self) -> int:
        return len(self._jacobians)

    @property
    def quote_ids(self) -> List[str]:
        """All quote identifiers, in first-seen order across curves."""
        seen: Dict[str, None] = {}
        for jac in self._jacobians.values():
            for qid in jac.quote_ids:
                seen.setdefault(qid, None)
        return list(seen)

    def merged(self, other: Mapping[str, CurveJacobian]) -> "JacobianBundle":
        """New bundle with the entries of other added (replacing same-named curves)."""
        jacobians = dict(self._jacobians)
        jacobians.update(other)
        return JacobianBundle(jacobians)

    def stacked(self, curve_names: Sequence[str], quote_ids: Sequence[str]) -> np.ndarray:
        """
        Jacobians of several curves stacked by rows, on a common quote axis.

        Args:
            curve_names: Curves whose parameter rows are stacked in this order
            quote_ids: Column labels; quotes a curve does not depend on are zero

        Returns:
            Array of shape (sum of parameter counts, len(quote_ids))
        """
        column = {qid: j for j, qid in enumerate(quote_ids)}
        blocks = []
        for name in curve_names:
            jac = self._jacobians[name]
            block = np.zeros((jac.n_parameters, len(quote_ids)))
            for k, qid in enumerate(jac.quote_ids):
                if qid not in column:
                    raise KeyError(f"Quote {qid} of curve {name} is not on the target axis")
                block[:, column[qid]] = jac.matrix[:, k]
            blocks.append(block)
        if not blocks:
            return np.zeros((0, len(quote_ids)))
        return np.vstack(blocks)

    def to_frame(self, name: str) -> pd.DataFrame:
        """Jacobian of one curve as a DataFrame (parameters x quotes)."""
        jac = self._jacobians[name]
        return pd.DataFrame(jac.matrix, columns=list(jac.quote_ids))

    def __repr__(self) -> str:
        shapes = {name: jac.matrix.shape for name, jac in self._jacobians.items()}
        return f"JacobianBundle({shapes})"


__all__ = [
    "CurveJacobian",
    "JacobianBundle",
]
