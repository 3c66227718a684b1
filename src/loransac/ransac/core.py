# Andy Zhao
"""
Generic LO-RANSAC loop (model-agnostic).

LO-RANSAC overview:
- Randomly sample a *minimal* subset of observations
- Fit candidate models from that subset (the kernel may return 0, 1 or more)
- Score every candidate by counting observations with residual <= tau
- When a candidate beats the best so far, locally optimize it
  (least squares + IRLS + inner resampling on its inliers)
- Shrink the iteration budget from the best inlier ratio (adaptive stopping)

Uses the ProblemKernel Protocol from types.py:
    the same loop fits lines, affine transforms, translations, ...
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from .config import LoRansacParams
from .errors import InsufficientDataError, NoValidModelError
from .local_opt import local_optimization
from .sampler import sample_indices
from .scoring import ScoreEvaluator, best_of
from .types import Hypothesis, IndexArray, M, ProblemKernel, RansacResult

logger = logging.getLogger(__name__)

# Stand-in for "infinitely many iterations" when no inlier has been seen yet
_UNBOUNDED_ITERS = int(1e9)


def required_iterations(
        *,
        confidence: float,
        inlier_ratio: float,
        sample_size: int,
) -> int:
    """
    Number of iterations needed so that the probability of having drawn at
    least ONE all-inlier minimal sample is >= confidence.

    inlier ratio w = (# inliers) / N, minimal sample s = minimum_samples,
    - P(all-inliers) = w^s
    - P(not-all-inlier-for-k-times) = (1 - w^s)^k
    - 1 - (1 - w^s)^k >= p   =>   k >= log(1 - p) / log(1 - w^s)

    Edge cases:
     - w == 0  -> impossible, return "infinite-ish" (capped by max_iters)
     - w == 1  -> 1 iteration is enough
    """
    p = float(np.clip(confidence, 1e-12, 1.0 - 1e-12))
    w = float(np.clip(inlier_ratio, 0.0, 1.0))
    s = int(sample_size)

    if s <= 0:
        raise ValueError("sample_size must be >= 1")

    if w >= 1.0:
        return 1
    if w <= 0.0:
        return _UNBOUNDED_ITERS

    # If w^s is extremely tiny, log(1 - w^s) is close to 0
    w_to_s = float(np.clip(w ** s, 1e-12, 1.0 - 1e-12))

    k = int(np.ceil(np.log(1.0 - p) / np.log(1.0 - w_to_s)))
    return int(min(max(1, k), _UNBOUNDED_ITERS))


def lo_ransac(
        kernel: ProblemKernel[M],
        *,
        threshold: float,
        rng: np.random.Generator,
        n: Optional[int] = None,
        params: LoRansacParams = LoRansacParams(),
) -> RansacResult[M]:
    """
    Run LO-RANSAC on the observations held by `kernel`.

    Inputs:
    - kernel: provides minimal / least-squares fits, residuals and weights
    - threshold: inlier threshold tau (same unit as kernel.residuals)
    - rng: caller-owned generator, advanced sequentially, never reseeded
    - n: number of observations (default: kernel.num_observations())
    - params: loop and local optimization tunables

    Returns:
    - RansacResult with the best model and its sorted inlier indices.
      confidence_reached=False means max_iters ran out first; the model is
      still the best found, but may be unreliable for a low inlier ratio.

    Raises:
    - InsufficientDataError if n < kernel.minimum_samples
    - NoValidModelError if every sample was degenerate
    - ValueError for a non-positive threshold
    """
    # ---------- Input validation ----------
    if n is None:
        n = kernel.num_observations()
    n = int(n)
    m = int(kernel.minimum_samples)
    if m < 1:
        raise ValueError(f"kernel.minimum_samples must be >= 1, got {m}")
    if n < m:
        raise InsufficientDataError(available=n, required=m)

    scorer = ScoreEvaluator(float(threshold))
    min_inliers = params.min_inliers if params.min_inliers is not None else m

    # Track the best hypothesis and the first one ever produced
    best: Optional[Hypothesis[M]] = None
    first: Optional[Hypothesis[M]] = None
    lo_runs = 0
    degenerate = 0

    # ---------- Adaptive Stopping ----------
    target_iters = params.max_iters
    i = 0

    # ---------- Main Loop ----------
    while i < target_iters:
        i += 1

        sample = sample_indices(n, m, rng)
        models = kernel.fit_minimal(sample)
        if not models:
            degenerate += 1
            logger.debug("Iteration %d: degenerate sample %s", i, sample.tolist())
            continue

        for model in models:
            hypothesis = scorer.evaluate(kernel, model, n)
            if first is None:
                first = hypothesis

            if hypothesis.score < min_inliers or not hypothesis.is_better_than(best):
                continue

            # New trial-best: refine it before it becomes the best
            lo_runs += 1
            refined = local_optimization(kernel, scorer, hypothesis, n, rng, params)
            best = best_of(best, refined)

            w = best.score / float(n)
            iter_needed = required_iterations(
                confidence=params.confidence,
                inlier_ratio=w,
                sample_size=m,
            )
            target_iters = min(params.max_iters, max(iter_needed, i))
            logger.debug(
                "Iteration %d: better model, inliers=%d/%d (trial %d), w=%.3f, target_iters=%d",
                i, best.score, n, hypothesis.score, w, target_iters,
            )

    # ---------- Result ----------
    if best is None:
        if first is None:
            raise NoValidModelError(iterations=i)
        logger.warning(
            "No hypothesis reached %d inliers in %d iterations; "
            "returning the first minimal fit (%d inliers)",
            min_inliers, i, first.score,
        )
        chosen = first
        confidence_reached = False
    else:
        chosen = best
        needed = required_iterations(
            confidence=params.confidence,
            inlier_ratio=best.score / float(n),
            sample_size=m,
        )
        confidence_reached = i >= needed
        if not confidence_reached:
            logger.warning(
                "Stopped at max_iters=%d before reaching confidence %.3f "
                "(inlier ratio %.3f needs %d iterations)",
                params.max_iters, params.confidence, best.score / float(n), needed,
            )

    result = RansacResult(
        model=chosen.model,
        inliers=chosen.inliers,
        num_inliers=chosen.score,
        rms_error=scorer.rms(kernel, chosen.model, chosen.inliers),
        iterations=i,
        threshold=scorer.threshold,
        num_observations=n,
        confidence_reached=confidence_reached,
        lo_runs=lo_runs,
        degenerate_samples=degenerate,
    )
    logger.info(
        "LO-RANSAC done: inliers=%d/%d, iterations=%d, lo_runs=%d, degenerate=%d",
        result.num_inliers, n, i, lo_runs, degenerate,
    )
    return result


def estimate(
        n: int,
        kernel: ProblemKernel[M],
        threshold: float,
        rng: np.random.Generator,
        max_iters: int = 1000,
        confidence: float = 0.99,
) -> Tuple[M, IndexArray]:
    """
    Shorthand returning only (best_model, inlier_indices).
    """
    params = LoRansacParams(max_iters=max_iters, confidence=confidence)
    result = lo_ransac(kernel, threshold=threshold, rng=rng, n=n, params=params)
    return result.model, result.inliers
