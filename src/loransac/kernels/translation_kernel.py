# Andy Zhao
"""
Adapter class for the translation-only model to match the ProblemKernel protocol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional

from ..ransac.types import (
    FloatArray, IndexArray, Mat3x3, Points2D, inverse_square_weights,
)
from .affine_kernel import as_correspondences
from .translation import (
    fit_translation_minimal,
    fit_translation_least_squares,
    residuals_L2_translation,
)


@dataclass(frozen=True)
class TranslationKernel:
    """
    Translation-only motion between pts0 and pts1.

    One correspondence is a full sample, so the adaptive stopping rule
    terminates after very few iterations for clean data.
    """
    pts0: Points2D
    pts1: Points2D

    minimum_samples: ClassVar[int] = 1
    minimum_lssamples: ClassVar[int] = 1

    def __post_init__(self) -> None:
        p0, p1 = as_correspondences(self.pts0, self.pts1)
        object.__setattr__(self, "pts0", p0)
        object.__setattr__(self, "pts1", p1)

    def num_observations(self) -> int:
        return int(self.pts0.shape[0])

    def fit_minimal(self, sample: IndexArray) -> List[Mat3x3]:
        T = fit_translation_minimal(self.pts0[sample], self.pts1[sample])
        return [] if T is None else [T]

    def fit_least_squares(
            self,
            indices: IndexArray,
            weights: Optional[FloatArray] = None,
    ) -> Optional[Mat3x3]:
        return fit_translation_least_squares(self.pts0[indices], self.pts1[indices], weights)

    def residuals(self, model: Mat3x3, indices: Optional[IndexArray] = None) -> FloatArray:
        if indices is None:
            return residuals_L2_translation(model, self.pts0, self.pts1)
        return residuals_L2_translation(model, self.pts0[indices], self.pts1[indices])

    def compute_weights(self, model: Mat3x3, inliers: IndexArray, eps: float = 1e-3) -> FloatArray:
        return inverse_square_weights(self.residuals(model, inliers), eps)
