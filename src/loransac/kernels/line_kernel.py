# Andy Zhao
"""
Adapter: makes the line functions conform to the ProblemKernel Protocol.

This keeps ransac/core.py generic and reusable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional

import numpy as np

from ..ransac.types import (
    FloatArray, IndexArray, Line2D, Points2D, inverse_square_weights,
)
from .line import fit_line_minimal, fit_line_least_squares, residuals_line


@dataclass(frozen=True)
class LineKernel:
    """
    Line fitting kernel over an (N,2) array of points.

    eps_dx:
      Two sample points closer than this in x are a degenerate sample.
    """
    xy: Points2D
    eps_dx: float = 1e-12

    minimum_samples: ClassVar[int] = 2
    minimum_lssamples: ClassVar[int] = 2

    def __post_init__(self) -> None:
        xy = np.asarray(self.xy, dtype=np.float64)
        if xy.ndim != 2 or xy.shape[1] != 2:
            raise ValueError(f"Expected xy shape (N,2), got {xy.shape}")
        object.__setattr__(self, "xy", xy)

    def num_observations(self) -> int:
        return int(self.xy.shape[0])

    def fit_minimal(self, sample: IndexArray) -> List[Line2D]:
        model = fit_line_minimal(self.xy[sample], eps_dx=self.eps_dx)
        return [] if model is None else [model]

    def fit_least_squares(
            self,
            indices: IndexArray,
            weights: Optional[FloatArray] = None,
    ) -> Optional[Line2D]:
        return fit_line_least_squares(self.xy[indices], weights)

    def residuals(self, model: Line2D, indices: Optional[IndexArray] = None) -> FloatArray:
        pts = self.xy if indices is None else self.xy[indices]
        return residuals_line(model, pts)

    def compute_weights(self, model: Line2D, inliers: IndexArray, eps: float = 1e-3) -> FloatArray:
        return inverse_square_weights(self.residuals(model, inliers), eps)
