# Andy Zhao
"""
Local optimization step of LO-RANSAC.

Runs only when the outer loop finds a new trial-best hypothesis.

1) Iterated least-squares refit on the inliers of the trial-best, then IRLS.
2) Inner resampling: draw small subsets of the current best inliers,
   least-squares fit each one, and refine the winners with IRLS.
   Fitting on a subset of inliers (instead of a minimal sample) gives
   hypotheses that are already close to the optimum.

IRLS (iteratively reweighted least squares), one round:
    w_i   = 1 / max(eps, r_i)^2          for i in current inliers
    model = weighted least squares over current inliers with w
    re-score model under the same threshold
Stops at a fixed point (same inlier set twice) or after `rounds` rounds.

A refinement round is kept only if its inlier count is not below the count
it started from, so the returned hypothesis is never worse than the trial-best.
"""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .config import LoRansacParams
from .errors import RefitDegeneracy
from .sampler import sample_from
from .scoring import ScoreEvaluator, best_of
from .types import FloatArray, Hypothesis, IndexArray, M, ProblemKernel

logger = logging.getLogger(__name__)


def _try_refit(
        kernel: ProblemKernel[M],
        indices: IndexArray,
        weights: Optional[FloatArray] = None,
) -> Optional[M]:
    """
    Least-squares refit that turns rank deficiency into None.
    """
    try:
        return kernel.fit_least_squares(indices, weights)
    except (RefitDegeneracy, np.linalg.LinAlgError) as exc:
        logger.debug("Refit degeneracy on %d observations: %s", indices.shape[0], exc)
        return None


def irls_refine(
        kernel: ProblemKernel[M],
        scorer: ScoreEvaluator,
        hypothesis: Hypothesis[M],
        n: int,
        *,
        rounds: int = 4,
        eps: float = 1e-3,
        weighted: bool = True,
) -> Hypothesis[M]:
    """
    Refine `hypothesis` with IRLS seeded from its own inlier set.

    weighted=False runs the same loop with plain least squares
    (iterated refit on the growing inlier set).

    Returns the input unchanged when it has fewer than kernel.minimum_lssamples
    inliers, or when the first refit is degenerate.
    """
    if hypothesis.score < kernel.minimum_lssamples:
        logger.debug(
            "Skipping IRLS: %d inliers < minimum_lssamples=%d",
            hypothesis.score, kernel.minimum_lssamples,
        )
        return hypothesis

    current = hypothesis
    for round_idx in range(rounds):
        weights = None
        if weighted:
            weights = kernel.compute_weights(current.model, current.inliers, eps)
            if weights.shape != current.inliers.shape:
                raise ValueError(
                    f"compute_weights returned shape {weights.shape}, "
                    f"expected {current.inliers.shape}"
                )

        model = _try_refit(kernel, current.inliers, weights)
        if model is None:
            # keep the pre-refinement model
            break

        refined = scorer.evaluate(kernel, model, n)
        if refined.score < current.score:
            logger.debug(
                "IRLS round %d lost support (%d -> %d), keeping previous model",
                round_idx, current.score, refined.score,
            )
            break

        converged = refined.same_support(current)
        current = refined
        if converged:
            break

    return current


def _refine(
        kernel: ProblemKernel[M],
        scorer: ScoreEvaluator,
        hypothesis: Hypothesis[M],
        n: int,
        params: LoRansacParams,
) -> Hypothesis[M]:
    # plain least squares until the support stops growing, then IRLS
    seeded = irls_refine(
        kernel, scorer, hypothesis, n,
        rounds=params.lo_rounds, eps=params.weight_eps, weighted=False,
    )
    return irls_refine(
        kernel, scorer, seeded, n,
        rounds=params.lo_rounds, eps=params.weight_eps,
    )


def local_optimization(
        kernel: ProblemKernel[M],
        scorer: ScoreEvaluator,
        trial: Hypothesis[M],
        n: int,
        rng: np.random.Generator,
        params: LoRansacParams = LoRansacParams(),
) -> Hypothesis[M]:
    """
    Full local optimization of a trial-best hypothesis.

    The returned hypothesis has a score >= trial.score.
    """
    min_ls = kernel.minimum_lssamples
    if trial.score < min_ls:
        return trial

    # ---------- Least squares on all inliers, then IRLS ----------
    best = _refine(kernel, scorer, trial, n, params)

    # ---------- Inner resampling from the inliers ----------
    for _ in range(params.lo_inner_repetitions):
        size = min(params.lo_inner_sample_size, best.score // 2)
        if size < min_ls:
            break

        subset = sample_from(best.inliers, size, rng)
        model = _try_refit(kernel, subset)
        if model is None:
            continue

        candidate = scorer.evaluate(kernel, model, n)
        if candidate.is_better_than(best):
            best = best_of(best, _refine(kernel, scorer, candidate, n, params))

    logger.debug("Local optimization: %d -> %d inliers", trial.score, best.score)
    return best
