# Andy Zhao
"""
Adapter: makes the affine functions conform to the ProblemKernel Protocol.

Observation i is the correspondence pts0[i] -> pts1[i].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional

import numpy as np

from ..ransac.types import (
    FloatArray, IndexArray, Mat3x3, Points2D, inverse_square_weights,
)
from .affine import fit_affine_minimal, fit_affine_least_squares, residuals_L2


def as_correspondences(pts0: Points2D, pts1: Points2D) -> tuple[Points2D, Points2D]:
    """
    Validate and convert a pair of (N,2) point arrays to float64.
    """
    p0 = np.asarray(pts0, dtype=np.float64)
    p1 = np.asarray(pts1, dtype=np.float64)
    if p0.shape != p1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {p0.shape} vs {p1.shape}")
    if p0.ndim != 2 or p0.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {p0.shape}")
    return p0, p1


@dataclass(frozen=True)
class AffineKernel:
    pts0: Points2D
    pts1: Points2D
    eps_area: float = 1e-6

    minimum_samples: ClassVar[int] = 3
    minimum_lssamples: ClassVar[int] = 3

    def __post_init__(self) -> None:
        p0, p1 = as_correspondences(self.pts0, self.pts1)
        object.__setattr__(self, "pts0", p0)
        object.__setattr__(self, "pts1", p1)

    def num_observations(self) -> int:
        return int(self.pts0.shape[0])

    def fit_minimal(self, sample: IndexArray) -> List[Mat3x3]:
        T = fit_affine_minimal(self.pts0[sample], self.pts1[sample], eps_area=self.eps_area)
        return [] if T is None else [T]

    def fit_least_squares(
            self,
            indices: IndexArray,
            weights: Optional[FloatArray] = None,
    ) -> Optional[Mat3x3]:
        return fit_affine_least_squares(self.pts0[indices], self.pts1[indices], weights)

    def residuals(self, model: Mat3x3, indices: Optional[IndexArray] = None) -> FloatArray:
        if indices is None:
            return residuals_L2(model, self.pts0, self.pts1)
        return residuals_L2(model, self.pts0[indices], self.pts1[indices])

    def compute_weights(self, model: Mat3x3, inliers: IndexArray, eps: float = 1e-3) -> FloatArray:
        return inverse_square_weights(self.residuals(model, inliers), eps)
