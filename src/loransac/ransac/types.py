# Andy Zhao

"""
Shared typed primitives for the LO-RANSAC engine.

Defines:
- Typed NumPy aliases
    - Observations are referenced by int64 index arrays
    - Residuals and weights are float64 vectors
- Generic problem kernel protocol (what the engine needs from a model)
- Hypothesis and result containers (model + inliers + stats)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, List, Optional, Protocol, TypeAlias, TypeVar

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# - float64 for residuals / weights / geometry
# - int64 for observation indices
# - bool_ for masks

FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]
IndexArray: TypeAlias = npt.NDArray[np.int64]

# Points in 2D. Stored as float64 for consistency in math.
Points2D: TypeAlias = FloatArray      # shape: (N, 2)

# Homogeneous points [x, y, 1] for 3x3 transforms.
PointsHomog: TypeAlias = FloatArray   # shape: (N, 3)

# Boolean inlier mask: True as inlier, False as outlier
Mask: TypeAlias = BoolArray           # shape: (N,)

# 3x3 homogeneous transform matrix (affine / translation kernels).
Mat3x3: TypeAlias = FloatArray        # shape: (3, 3)

# Line model [a, b] for y = a*x + b.
Line2D: TypeAlias = FloatArray        # shape: (2,)

M = TypeVar("M")


class ProblemKernel(Protocol[M]):
    """
    Interface a model must implement to be usable by the LO-RANSAC engine.

    The kernel owns the observations; the engine only ever hands it
    index arrays into [0, N).

    LO-RANSAC steps that call into the kernel:
    1) fit candidate models from a minimal sample
    2) score all observations with a per-observation residual
    3) refit with (weighted) least squares during local optimization
    4) reweight the current inliers between IRLS rounds
    """

    minimum_samples: ClassVar[int]
    minimum_lssamples: ClassVar[int]

    def num_observations(self) -> int:
        """Number of observations N held by the kernel."""
        ...

    def fit_minimal(self, sample: IndexArray) -> List[M]:
        """
        Fit from exactly `minimum_samples` observations.
        Return an empty list if the sample is degenerate (e.g., repeated x for a line).
        """
        ...

    def fit_least_squares(
            self,
            indices: IndexArray,
            weights: Optional[FloatArray] = None,
    ) -> Optional[M]:
        """
        Refit from any subset with at least `minimum_lssamples` members.
        `weights` is aligned with `indices` when given.
        Return None (or raise RefitDegeneracy) if the subset is rank-deficient.
        """
        ...

    def residuals(self, model: M, indices: Optional[IndexArray] = None) -> FloatArray:
        """
        Residual of each observation in `indices` (all observations if None).
        Shape: (len(indices),). Non-negative, smaller = better.
        """
        ...

    def compute_weights(self, model: M, inliers: IndexArray, eps: float = 1e-3) -> FloatArray:
        """
        IRLS weights for `inliers` under `model`, aligned with `inliers`.
        """
        ...


def inverse_square_weights(residuals: FloatArray, eps: float = 1e-3) -> FloatArray:
    """
    Default reweighting policy:

        w_i = 1 / max(eps, r_i)^2

    Observations the current model already explains well get most of the
    influence. `eps` floors the residual so exact fits do not divide by zero.
    """
    if eps <= 0.0:
        raise ValueError("eps must be > 0")
    r = np.maximum(float(eps), np.asarray(residuals, dtype=np.float64))
    return (1.0 / (r * r)).astype(np.float64)


# ---------- Hypothesis ----------
@dataclass(frozen=True)
class Hypothesis(Generic[M]):
    model: M                # model produced by the kernel
    inliers: IndexArray     # sorted indices with residual <= threshold
    score: int              # inlier count

    def is_better_than(self, other: Optional["Hypothesis[M]"]) -> bool:
        # Strictly greater: on ties the earlier hypothesis is kept
        return other is None or self.score > other.score

    def same_support(self, other: "Hypothesis[M]") -> bool:
        return self.score == other.score and np.array_equal(self.inliers, other.inliers)


# ---------- LO-RANSAC output container ----------
# frozen=True means "immutable" after construction
@dataclass(frozen=True)
class RansacResult(Generic[M]):
    model: M                    # best model found (e.g., [a, b] for a line)
    inliers: IndexArray         # sorted inlier indices under the best model
    num_inliers: int            # len(inliers)
    rms_error: float            # RMS residual of inliers under the best model
    iterations: int             # how many outer iterations were actually run
    threshold: float            # the inlier threshold tau used
    num_observations: int       # N
    confidence_reached: bool    # False when max_iters ran out before the stopping rule
    lo_runs: int = 0            # how many times local optimization was triggered
    degenerate_samples: int = 0 # samples for which fit_minimal returned no model

    @property
    def inlier_ratio(self) -> float:
        if self.num_observations == 0:
            return 0.0
        return self.num_inliers / float(self.num_observations)

    @property
    def inlier_mask(self) -> Mask:
        mask = np.zeros((self.num_observations,), dtype=np.bool_)
        mask[self.inliers] = True
        return mask


# ---------- Helper Function ----------
def as_homogeneous(pts: Points2D) -> PointsHomog:
    """
    Convert (N,2) points -> (N,3) homogeneous points: [x, y, 1].
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected points shape (N, 2) but got {pts.shape}")

    ones = np.ones((pts.shape[0], 1), dtype=np.float64)
    return np.hstack([pts.astype(np.float64), ones])


def is_valid_mat3x3(T: Mat3x3) -> bool:
    """
    Verify a 3x3 transform matrix.
    Used for rejecting failed fits.
    """
    return isinstance(T, np.ndarray) and T.shape == (3, 3) and np.isfinite(T).all()


def as_index_array(indices) -> IndexArray:
    """
    Normalize any integer sequence into a 1D int64 index array.
    """
    idx = np.asarray(indices, dtype=np.int64)
    if idx.ndim != 1:
        raise ValueError(f"Expected a 1D index array, got shape {idx.shape}")
    return idx
