# Andy Zhao
"""
Translation-only motion model.

Assume every correspondence moves by the same displacement:
    pts1 ≈ pts0 + t,   t = (tx, ty)

Only 2 degrees of freedom, so a single correspondence is a minimal sample.
Models are 3x3 homogeneous matrices, compatible with the affine kernel.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..ransac.types import FloatArray, Mat3x3, Points2D


def make_translation(tx: float, ty: float) -> Mat3x3:
    """
        [ 1   0   tx ]
        [ 0   1   ty ]
        [ 0   0    1 ]
    """
    T = np.eye(3, dtype=np.float64)
    T[0, 2] = float(tx)
    T[1, 2] = float(ty)
    return T


def fit_translation_minimal(pts0: Points2D, pts1: Points2D) -> Optional[Mat3x3]:
    """
    t = p1 - p0 from a single correspondence.
    """
    if pts0.shape[0] < 1:
        return None
    displacement = pts1[0] - pts0[0]
    if not np.isfinite(displacement).all():
        return None
    return make_translation(displacement[0], displacement[1])


def fit_translation_least_squares(
        pts0: Points2D,
        pts1: Points2D,
        weights: Optional[FloatArray] = None,
) -> Optional[Mat3x3]:
    """
    Least-squares translation is the (weighted) mean displacement:

        t = sum_i w_i (p1_i - p0_i) / sum_i w_i

    Returns None when there are no points or the weights sum to zero.
    """
    n = pts0.shape[0]
    if n < 1:
        return None

    displacements = (pts1 - pts0).astype(np.float64)
    if weights is None:
        t = displacements.mean(axis=0)
    else:
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != (n,):
            raise ValueError(f"weights must have shape ({n},), got {w.shape}")
        total = float(w.sum())
        if not np.isfinite(total) or total <= 0.0:
            return None
        t = (displacements * w[:, None]).sum(axis=0) / total

    return make_translation(t[0], t[1])


def residuals_L2_translation(T: Mat3x3, pts0: Points2D, pts1: Points2D) -> FloatArray:
    """
    error_i = || pts0_i + t - pts1_i ||
    """
    t = np.array([T[0, 2], T[1, 2]], dtype=np.float64)
    diff = pts0 + t - pts1
    return np.linalg.norm(diff, axis=1).astype(np.float64)
