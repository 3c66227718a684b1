# Andy Zhao
"""
Tunables of the LO-RANSAC loop.

The inlier threshold and the random generator are passed to lo_ransac()
directly since they are per-problem. Everything here has a sane default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LoRansacParams:
    """
    Parameters of the outer loop and of local optimization.

    Outer loop:
    - max_iters:
      Hard cap on outer iterations, degenerate samples included.
    - confidence:
      Target probability p of having drawn at least one all-inlier sample.
      Used by the adaptive stopping rule.
    - min_inliers:
      Minimum inlier count for a hypothesis to be viable.
      None means kernel.minimum_samples.

    Local optimization:
    - lo_rounds:
      Max IRLS rounds per refinement (stops earlier at a fixed point).
    - lo_inner_repetitions:
      Number of inner least-squares resamples drawn from the trial-best inliers.
      0 disables inner resampling (plain IRLS only).
    - lo_inner_sample_size:
      Upper bound on the inner sample size. The actual size is
      min(lo_inner_sample_size, |inliers| // 2), never below minimum_lssamples.
    - weight_eps:
      Residual floor of the inverse-square weights 1 / max(eps, r)^2.
    """
    max_iters: int = 1000
    confidence: float = 0.99
    min_inliers: Optional[int] = None

    lo_rounds: int = 4
    lo_inner_repetitions: int = 10
    lo_inner_sample_size: int = 14
    weight_eps: float = 1e-3

    def __post_init__(self) -> None:
        if self.max_iters < 1:
            raise ValueError("LoRansacParams.max_iters must be >= 1")
        if not (0.0 < self.confidence < 1.0):
            raise ValueError("LoRansacParams.confidence must be in (0, 1)")
        if self.min_inliers is not None and self.min_inliers < 1:
            raise ValueError("LoRansacParams.min_inliers must be >= 1")
        if self.lo_rounds < 1:
            raise ValueError("LoRansacParams.lo_rounds must be >= 1")
        if self.lo_inner_repetitions < 0:
            raise ValueError("LoRansacParams.lo_inner_repetitions must be >= 0")
        if self.lo_inner_sample_size < 1:
            raise ValueError("LoRansacParams.lo_inner_sample_size must be >= 1")
        if self.weight_eps <= 0.0:
            raise ValueError("LoRansacParams.weight_eps must be > 0")
