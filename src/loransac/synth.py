# Andy Zhao
"""
Synthetic data with known ground truth for demos and tests.

Every generator takes the caller's np.random.Generator, so the same seed
always produces the same data set.

Outliers are displaced from the true model by at least a minimum offset,
which makes the true inlier count exact for any threshold below that offset.
Gaussian noise is truncated at `noise_clip` sigmas for the same reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .kernels.affine import apply_T
from .ransac.types import IndexArray, Line2D, Mat3x3, Points2D


@dataclass(frozen=True)
class LineSample:
    xy: Points2D            # (N,2) points, inliers and outliers mixed
    inliers: IndexArray     # sorted indices of the points generated on the line
    model: Line2D           # ground truth [a, b]

    @property
    def outliers(self) -> IndexArray:
        mask = np.ones((self.xy.shape[0],), dtype=np.bool_)
        mask[self.inliers] = False
        return np.flatnonzero(mask).astype(np.int64)


@dataclass(frozen=True)
class CorrespondenceSample:
    pts0: Points2D
    pts1: Points2D
    inliers: IndexArray
    model: Mat3x3


def num_outliers(n: int, outlier_ratio: float) -> int:
    if not (0.0 <= outlier_ratio < 1.0):
        raise ValueError(f"outlier_ratio must be in [0, 1), got {outlier_ratio}")
    return int(round(n * outlier_ratio))


def _truncated_noise(
        rng: np.random.Generator,
        sigma: float,
        size: Tuple[int, ...],
        clip: float,
) -> np.ndarray:
    if sigma <= 0.0:
        return np.zeros(size, dtype=np.float64)
    noise = rng.normal(0.0, sigma, size=size)
    return np.clip(noise, -clip * sigma, clip * sigma)


def _pick_outliers(n: int, n_out: int, rng: np.random.Generator) -> np.ndarray:
    mask = np.zeros((n,), dtype=np.bool_)
    mask[rng.permutation(n)[:n_out]] = True
    return mask


def make_line_points(
        n: int,
        outlier_ratio: float,
        noise_sigma: float,
        model: Line2D,
        rng: np.random.Generator,
        *,
        noise_clip: float = 2.0,
        outlier_min_offset: float = 1.0,
        outlier_max_offset: float = 20.0,
) -> LineSample:
    """
    Points on y = a*x + b at x = 0, 1, ..., n-1.

    - round(n * outlier_ratio) points chosen at random become outliers:
      y is shifted up or down by uniform(outlier_min_offset, outlier_max_offset)
    - the remaining points get N(0, noise_sigma) noise in y, truncated at
      noise_clip * noise_sigma
    """
    if n < 1:
        raise ValueError("n must be >= 1")
    if noise_sigma < 0.0:
        raise ValueError("noise_sigma must be >= 0")
    if not (0.0 < outlier_min_offset <= outlier_max_offset):
        raise ValueError("need 0 < outlier_min_offset <= outlier_max_offset")

    a, b = float(model[0]), float(model[1])
    n_out = num_outliers(n, outlier_ratio)

    x = np.arange(n, dtype=np.float64)
    y = a * x + b

    is_outlier = _pick_outliers(n, n_out, rng)
    inlier_idx = np.flatnonzero(~is_outlier).astype(np.int64)
    outlier_idx = np.flatnonzero(is_outlier)

    y[inlier_idx] += _truncated_noise(rng, noise_sigma, (inlier_idx.shape[0],), noise_clip)

    signs = rng.choice(np.array([-1.0, 1.0]), size=n_out)
    offsets = rng.uniform(outlier_min_offset, outlier_max_offset, size=n_out)
    y[outlier_idx] += signs * offsets

    return LineSample(
        xy=np.column_stack([x, y]),
        inliers=inlier_idx,
        model=np.array([a, b], dtype=np.float64),
    )


def make_correspondences(
        T: Mat3x3,
        n: int,
        outlier_ratio: float,
        rng: np.random.Generator,
        *,
        noise_sigma: float = 0.0,
        noise_clip: float = 2.0,
        extent: Tuple[float, float] = (640.0, 480.0),
        outlier_min_error: float = 20.0,
        outlier_max_error: float = 200.0,
) -> CorrespondenceSample:
    """
    Correspondences pts0 -> apply_T(T, pts0) in an image-sized box.

    Outliers are moved away from their true target by a random direction and
    a distance in [outlier_min_error, outlier_max_error] pixels.
    """
    if n < 1:
        raise ValueError("n must be >= 1")
    n_out = num_outliers(n, outlier_ratio)

    w, h = extent
    pts0 = rng.uniform([0.0, 0.0], [w, h], size=(n, 2)).astype(np.float64)
    pts1 = apply_T(T, pts0)

    is_outlier = _pick_outliers(n, n_out, rng)
    inlier_idx = np.flatnonzero(~is_outlier).astype(np.int64)
    outlier_idx = np.flatnonzero(is_outlier)

    pts1[inlier_idx] += _truncated_noise(rng, noise_sigma, (inlier_idx.shape[0], 2), noise_clip)

    angles = rng.uniform(0.0, 2.0 * np.pi, size=n_out)
    dist = rng.uniform(outlier_min_error, outlier_max_error, size=n_out)
    pts1[outlier_idx] += np.column_stack([np.cos(angles), np.sin(angles)]) * dist[:, None]

    return CorrespondenceSample(
        pts0=pts0,
        pts1=pts1,
        inliers=inlier_idx,
        model=np.asarray(T, dtype=np.float64).copy(),
    )
