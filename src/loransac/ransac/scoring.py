# Andy Zhao
"""
Inlier-count scoring.

For a model and a fixed threshold tau:
    inliers = { i : residual(i, model) <= tau }
    score   = |inliers|

Ties in the count are NOT broken by residual magnitude; the outer loop keeps
the first hypothesis that reached a given count.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .types import FloatArray, Hypothesis, IndexArray, M, ProblemKernel


@dataclass(frozen=True)
class ScoreEvaluator:
    threshold: float

    def __post_init__(self) -> None:
        if not np.isfinite(self.threshold) or self.threshold <= 0.0:
            raise ValueError(f"threshold must be a finite value > 0, got {self.threshold}")

    def inliers_of(self, residuals: FloatArray) -> IndexArray:
        """
        Indices of residuals at or below threshold.
        NaN compares False, so non-finite residuals are outliers.
        """
        r = np.asarray(residuals, dtype=np.float64)
        return np.flatnonzero(r <= self.threshold).astype(np.int64)

    def evaluate(self, kernel: ProblemKernel[M], model: M, n: int) -> Hypothesis[M]:
        """
        Score `model` against all n observations of `kernel`.
        """
        err = kernel.residuals(model)
        if err.shape != (n,):
            raise ValueError(f"kernel.residuals returned shape {err.shape}, expected ({n},)")

        inliers = self.inliers_of(err)
        return Hypothesis(model=model, inliers=inliers, score=int(inliers.shape[0]))

    def rms(self, kernel: ProblemKernel[M], model: M, inliers: IndexArray) -> float:
        """
        RMS residual over an inlier set. Reported only, never used for ranking.
        """
        if inliers.shape[0] == 0:
            return float("nan")
        err = kernel.residuals(model, inliers)
        return float(np.sqrt(np.mean(err * err)))


def best_of(a: Optional[Hypothesis[M]], b: Hypothesis[M]) -> Hypothesis[M]:
    return b if b.is_better_than(a) else a
