"""
Visualization of LO-RANSAC results.
  - render line fits and correspondence fits into BGR canvases
  - green = inlier, red = outlier
Saving / showing the canvas is left to the caller.
"""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from ..ransac.types import IndexArray, Line2D, Points2D

_GREEN = (0, 255, 0)
_RED = (0, 0, 255)
_BLUE = (255, 128, 0)
_GRAY = (160, 160, 160)


def _inlier_mask(n: int, inliers: Optional[IndexArray]) -> np.ndarray:
    mask = np.zeros((n,), dtype=np.bool_)
    if inliers is not None:
        mask[np.asarray(inliers, dtype=np.int64)] = True
    return mask


def _data_to_canvas(
        xy: Points2D,
        size: Tuple[int, int],
        margin: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Affine map from data coordinates to pixel coordinates (y axis flipped).

    Returns (scale, offset) such that px = xy * scale + offset.
    """
    w, h = size
    lo = xy.min(axis=0)
    hi = xy.max(axis=0)
    span = np.maximum(hi - lo, 1e-9)

    sx = (w - 2 * margin) / span[0]
    sy = (h - 2 * margin) / span[1]
    scale = np.array([sx, -sy], dtype=np.float64)
    offset = np.array([margin - lo[0] * sx, h - margin + lo[1] * sy], dtype=np.float64)
    return scale, offset


def _draw_model_line(
        canvas: np.ndarray,
        model: Line2D,
        x_range: Tuple[float, float],
        scale: np.ndarray,
        offset: np.ndarray,
        color: Tuple[int, int, int],
        thickness: int,
) -> None:
    a, b = float(model[0]), float(model[1])
    ends = np.array([[x, a * x + b] for x in x_range], dtype=np.float64)
    px = ends * scale + offset
    p0 = (int(round(px[0, 0])), int(round(px[0, 1])))
    p1 = (int(round(px[1, 0])), int(round(px[1, 1])))
    cv2.line(canvas, p0, p1, color, thickness, cv2.LINE_AA)


def draw_line_fit(
        xy: Points2D,
        model: Line2D,
        inliers: Optional[IndexArray],
        *,
        size: Tuple[int, int] = (800, 600),
        margin: int = 20,
        gt_model: Optional[Line2D] = None,
        radius: int = 2,
) -> np.ndarray:
    """
    Render points and the fitted line y = a*x + b on a white canvas.

    Parameters:
    - xy: (N,2) observations
    - model: fitted [a, b]
    - inliers: inlier indices (None draws every point as outlier)
    - gt_model: optional ground truth line, drawn in gray under the fit

    Returns:
        (H, W, 3) uint8 BGR image.
    """
    xy = np.asarray(xy, dtype=np.float64)
    if xy.ndim != 2 or xy.shape[1] != 2 or xy.shape[0] == 0:
        raise ValueError(f"Expected non-empty xy of shape (N,2), got {xy.shape}")

    w, h = size
    canvas = np.full((h, w, 3), 255, dtype=np.uint8)
    scale, offset = _data_to_canvas(xy, size, margin)
    x_range = (float(xy[:, 0].min()), float(xy[:, 0].max()))

    if gt_model is not None:
        _draw_model_line(canvas, gt_model, x_range, scale, offset, _GRAY, 3)

    mask = _inlier_mask(xy.shape[0], inliers)
    px = np.rint(xy * scale + offset).astype(np.int64)
    for (u, v), ok in zip(px, mask):
        cv2.circle(canvas, (int(u), int(v)), radius, _GREEN if ok else _RED, -1)

    _draw_model_line(canvas, model, x_range, scale, offset, _BLUE, 1)
    return canvas


def draw_correspondence_arrows(
        frame_bgr: np.ndarray,
        pts0: Points2D,
        pts1: Points2D,
        inliers: Optional[IndexArray],
        *,
        max_draw: int = 200,
) -> np.ndarray:
    """
    Draw motion arrows pts0 -> pts1 on a frame.
    - inliers : green arrows
    - others  : red arrows
    """
    if frame_bgr is None or frame_bgr.size == 0:
        return frame_bgr

    vis = frame_bgr.copy()
    n = min(int(pts0.shape[0]), int(pts1.shape[0]))
    mask = _inlier_mask(n, inliers)

    for i in range(min(n, int(max_draw))):
        p0 = (int(round(float(pts0[i, 0]))), int(round(float(pts0[i, 1]))))
        p1 = (int(round(float(pts1[i, 0]))), int(round(float(pts1[i, 1]))))
        color = _GREEN if mask[i] else _RED
        cv2.arrowedLine(vis, p0, p1, color, 1, tipLength=0.25)
        cv2.circle(vis, p1, 2, color, -1)

    return vis


def draw_status_text(img_bgr: np.ndarray, lines: list[str]) -> np.ndarray:
    """
    Draw a small multi-line HUD at top-left of an image.
    """
    if img_bgr is None or img_bgr.size == 0:
        return img_bgr

    out = img_bgr.copy()
    x0, y0 = 10, 25
    dy = 28

    for i, text in enumerate(lines):
        y = y0 + i * dy
        cv2.putText(out, text, (x0, y),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                    (0, 0, 0), 2, cv2.LINE_AA)
    return out
