# Andy Zhao
"""
Affine model utilities (3x3 homogeneous form).

We estimate an affine transform T such that:

    [x', y', 1]^T  ≈  T @ [x, y, 1]^T

where:

    T = [[a, b, tx],
         [c, d, ty],
         [0, 0,  1]]

Unknowns are 6 parameters: a, b, tx, c, d, ty.
Each correspondence gives 2 equations, so 3 non-collinear correspondences
determine T exactly.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..ransac.types import (
    FloatArray, Mat3x3, Points2D, PointsHomog, as_homogeneous, is_valid_mat3x3,
)


# ---------- Degeneracy Check Helpers ----------
def _triangle_area2(p1: np.ndarray, p2: np.ndarray, p3: np.ndarray) -> float:
    """
    Return 2x the triangle area formed by (p1, p2, p3):

        area2 = |(p2 - p1) x (p3 - p1)|
    """
    u = p2 - p1
    v = p3 - p1
    return float(abs(u[0] * v[1] - u[1] * v[0]))


def _is_degenerate_triplet(pts: Points2D, eps_area: float = 1e-6) -> bool:
    """
    Check whether 3 points (shape (3,2)) are nearly collinear.
    """
    if pts.shape != (3, 2):
        raise ValueError(f"Expected (3,2) triplet, got {pts.shape}")
    return _triangle_area2(pts[0], pts[1], pts[2]) < eps_area


# ---------- Linear system ----------
def _build_system(pts0: Points2D, pts1: Points2D) -> tuple[FloatArray, FloatArray]:
    """
    Stack the (2N x 6) system A theta = b for theta = [a, b, tx, c, d, ty]:

        row 2i   : [x, y, 1, 0, 0, 0]  ->  x'
        row 2i+1 : [0, 0, 0, x, y, 1]  ->  y'
    """
    n = pts0.shape[0]
    A = np.zeros((2 * n, 6), dtype=np.float64)
    A[0::2, 0:2] = pts0
    A[0::2, 2] = 1.0
    A[1::2, 3:5] = pts0
    A[1::2, 5] = 1.0
    bvec = pts1.astype(np.float64).reshape(-1)
    return A, bvec


def _theta_to_mat3x3(theta: np.ndarray) -> Mat3x3:
    a, b, tx, c, d, ty = map(float, theta.tolist())
    return np.array(
        [
            [a, b, tx],
            [c, d, ty],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


# ---------- Affine Fitting ----------
def fit_affine_minimal(pts0: Points2D, pts1: Points2D, eps_area: float = 1e-6) -> Optional[Mat3x3]:
    """
    Fit affine transform from exactly 3 point correspondences.

    Returns:
      3x3 affine matrix, or None if degenerate / solve fails.
    """
    if pts0.shape != (3, 2) or pts1.shape != (3, 2):
        raise ValueError(f"fit_affine_minimal expects (3,2) inputs, got {pts0.shape} and {pts1.shape}")

    # Collinear triplets do not determine shear / rotation
    if _is_degenerate_triplet(pts0, eps_area) or _is_degenerate_triplet(pts1, eps_area):
        return None

    A, bvec = _build_system(pts0.astype(np.float64), pts1)
    try:
        theta = np.linalg.solve(A, bvec)
    except np.linalg.LinAlgError:
        return None

    T = _theta_to_mat3x3(theta)
    return T if is_valid_mat3x3(T) else None


def fit_affine_least_squares(
        pts0: Points2D,
        pts1: Points2D,
        weights: Optional[FloatArray] = None,
) -> Optional[Mat3x3]:
    """
    Fit affine transform from N >= 3 correspondences by (weighted) least squares.

    weights: (N,) per-correspondence weights; both rows of correspondence i
    are scaled by sqrt(w_i).

    Returns None if rank < 6 (collinear / repeated / clustered points).
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.ndim != 2 or pts0.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts0.shape}")
    n = pts0.shape[0]
    if n < 3:
        return None

    A, bvec = _build_system(pts0.astype(np.float64), pts1)

    if weights is not None:
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != (n,):
            raise ValueError(f"weights must have shape ({n},), got {w.shape}")
        if not np.isfinite(w).all() or (w < 0.0).any():
            raise ValueError("weights must be finite and non-negative")
        sw = np.repeat(np.sqrt(w), 2)
        A = A * sw[:, None]
        bvec = bvec * sw

    try:
        theta, _, rank, _ = np.linalg.lstsq(A, bvec, rcond=None)
    except np.linalg.LinAlgError:
        return None

    if rank < 6:
        return None

    T = _theta_to_mat3x3(theta)
    return T if is_valid_mat3x3(T) else None


# ---------- Apply transform + residuals ----------
def apply_T(T: Mat3x3, pts: Points2D) -> Points2D:
    """
    Apply a 3x3 transform to (N,2) points, returning (N,2) points.
    Divides by w, which is 1 for affine and translation matrices.
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")
    if T.shape != (3, 3):
        raise ValueError(f"Expected T shape (3,3), got {T.shape}")

    ph: PointsHomog = as_homogeneous(pts)
    ph_t = ph @ T.T
    return (ph_t[:, :2] / ph_t[:, 2:3]).astype(np.float64)


def residuals_L2(T: Mat3x3, pts0: Points2D, pts1: Points2D) -> FloatArray:
    """
    Per-correspondence L2 transfer error:

        e_i = || apply_T(T, pts0[i]) - pts1[i] ||_2

    Returns shape (N,)
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    diff = apply_T(T, pts0) - pts1.astype(np.float64)
    return np.linalg.norm(diff, axis=1).astype(np.float64)
