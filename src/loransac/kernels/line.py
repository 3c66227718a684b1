# Andy Zhao
"""
2D line model utilities.

We estimate a line

    y = a * x + b

from points (x, y). Model is the parameter vector [a, b].

Residual of a point is its vertical distance to the line:

    r = | a * x + b - y |

Vertical lines (x = const) cannot be represented; samples with equal x are
treated as degenerate.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..ransac.types import FloatArray, Line2D, Points2D


def _check_points(pts: Points2D) -> None:
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")


def fit_line_minimal(pts: Points2D, eps_dx: float = 1e-12) -> Optional[Line2D]:
    """
    Fit a line through exactly 2 points.

    Returns:
      [a, b], or None if the two points share the same x (degenerate).
    """
    if pts.shape != (2, 2):
        raise ValueError(f"fit_line_minimal expects a (2,2) input, got {pts.shape}")

    (x0, y0), (x1, y1) = pts.astype(np.float64)
    dx = float(x1 - x0)
    if abs(dx) <= eps_dx:
        return None

    a = float(y1 - y0) / dx
    b = float(y0) - a * float(x0)
    model = np.array([a, b], dtype=np.float64)
    if not np.isfinite(model).all():
        return None
    return model


def fit_line_least_squares(
        pts: Points2D,
        weights: Optional[FloatArray] = None,
) -> Optional[Line2D]:
    """
    Fit [a, b] from N >= 2 points by (weighted) least squares.

    Minimizes sum_i w_i * (a * x_i + b - y_i)^2.
    Weighting is done by scaling row i of the system by sqrt(w_i).

    Returns None if the system is rank-deficient (e.g., all x equal).
    """
    _check_points(pts)
    n = pts.shape[0]
    if n < 2:
        return None

    x = pts[:, 0].astype(np.float64)
    y = pts[:, 1].astype(np.float64)

    # A is (N x 2): each row [x_i, 1]
    A = np.column_stack([x, np.ones_like(x)])
    bvec = y.copy()

    if weights is not None:
        w = np.asarray(weights, dtype=np.float64)
        if w.shape != (n,):
            raise ValueError(f"weights must have shape ({n},), got {w.shape}")
        if not np.isfinite(w).all() or (w < 0.0).any():
            raise ValueError("weights must be finite and non-negative")
        sw = np.sqrt(w)
        A = A * sw[:, None]
        bvec = bvec * sw

    try:
        theta, _, rank, _ = np.linalg.lstsq(A, bvec, rcond=None)
    except np.linalg.LinAlgError:
        return None

    # 2 unknowns need 2 independent rows
    if rank < 2:
        return None

    model = theta.astype(np.float64)
    if not np.isfinite(model).all():
        return None
    return model


def residuals_line(model: Line2D, pts: Points2D) -> FloatArray:
    """
    Vertical residual per point: |a * x + b - y|. Returns shape (N,).
    """
    _check_points(pts)
    a, b = float(model[0]), float(model[1])
    predicted = a * pts[:, 0] + b
    return np.abs(predicted - pts[:, 1]).astype(np.float64)
