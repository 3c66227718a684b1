"""Tests for local optimization (least squares + IRLS + inner resampling)."""

import numpy as np
import pytest

from loransac.kernels import LineKernel
from loransac.ransac import (
    Hypothesis, LoRansacParams, RefitDegeneracy, ScoreEvaluator,
    irls_refine, local_optimization,
)
from loransac.synth import make_line_points


class RaisingRefitKernel(LineKernel):
    """Line kernel whose least-squares refit is always rank-deficient."""

    def fit_least_squares(self, indices, weights=None):
        raise RefitDegeneracy("rank deficient")


class LinAlgRefitKernel(LineKernel):
    def fit_least_squares(self, indices, weights=None):
        raise np.linalg.LinAlgError("SVD did not converge")


class ShortWeightsKernel(LineKernel):
    def compute_weights(self, model, inliers, eps=1e-3):
        return np.ones(inliers.shape[0] - 1)


@pytest.fixture
def noisy_line():
    rng = np.random.default_rng(5)
    return make_line_points(300, 0.3, 0.01, np.array([-2.0, 0.3]), rng)


@pytest.fixture
def clean_line():
    rng = np.random.default_rng(6)
    return make_line_points(300, 0.3, 0.0, np.array([-2.0, 6.3]), rng)


def _minimal_hypothesis(kernel, scorer, sample):
    model = kernel.fit_minimal(np.asarray(sample, dtype=np.int64))[0]
    return scorer.evaluate(kernel, model, kernel.num_observations())


class TestIrlsRefine:
    """Test the IRLS refinement loop."""

    def test_converged_zero_noise_is_fixed_point(self, clean_line):
        """Re-running IRLS on a converged exact fit does not move the model."""
        kernel = LineKernel(clean_line.xy)
        scorer = ScoreEvaluator(0.3)
        seed = scorer.evaluate(kernel, kernel.fit_least_squares(clean_line.inliers), 300)

        converged = irls_refine(kernel, scorer, seed, 300, rounds=10)
        again = irls_refine(kernel, scorer, converged, 300, rounds=10)

        assert np.allclose(again.model, converged.model, atol=1e-9)
        assert np.array_equal(again.inliers, converged.inliers)

    def test_converged_noisy_is_stable(self, noisy_line):
        """Re-running IRLS on converged noisy data changes the model very little."""
        kernel = LineKernel(noisy_line.xy)
        scorer = ScoreEvaluator(0.03)
        seed = scorer.evaluate(kernel, kernel.fit_least_squares(noisy_line.inliers), 300)

        converged = irls_refine(kernel, scorer, seed, 300, rounds=10)
        again = irls_refine(kernel, scorer, converged, 300, rounds=1)

        assert np.abs(again.model - converged.model).max() < 1e-2
        assert again.score >= converged.score

    def test_never_loses_support(self, noisy_line):
        """The refined score is never below the starting score."""
        kernel = LineKernel(noisy_line.xy)
        scorer = ScoreEvaluator(0.03)
        inl = noisy_line.inliers
        start = _minimal_hypothesis(kernel, scorer, [inl[10], inl[150]])
        refined = irls_refine(kernel, scorer, start, 300)
        assert refined.score >= start.score

    def test_skips_small_inlier_sets(self, clean_line):
        """Fewer inliers than minimum_lssamples: hypothesis returned as is."""
        kernel = LineKernel(clean_line.xy)
        h = Hypothesis(model=np.array([0.0, 0.0]), inliers=np.array([0], dtype=np.int64), score=1)
        assert irls_refine(kernel, ScoreEvaluator(0.3), h, 300) is h

    def test_weight_length_checked(self, clean_line):
        """compute_weights must return one weight per inlier."""
        kernel = ShortWeightsKernel(clean_line.xy)
        scorer = ScoreEvaluator(0.3)
        seed = scorer.evaluate(kernel, kernel.fit_least_squares(clean_line.inliers), 300)
        with pytest.raises(ValueError):
            irls_refine(kernel, scorer, seed, 300)

    def test_unweighted_mode_ignores_weights(self, clean_line):
        """weighted=False never calls compute_weights."""
        kernel = ShortWeightsKernel(clean_line.xy)
        scorer = ScoreEvaluator(0.3)
        seed = scorer.evaluate(kernel, kernel.fit_least_squares(clean_line.inliers), 300)
        refined = irls_refine(kernel, scorer, seed, 300, weighted=False)
        assert refined.score == 210


class TestLocalOptimization:
    """Test the full local optimization step."""

    def test_minimal_fit_grows_to_all_inliers(self, noisy_line):
        """A good minimal sample is refined to the full inlier set."""
        kernel = LineKernel(noisy_line.xy)
        scorer = ScoreEvaluator(0.03)
        inl = noisy_line.inliers
        trial = _minimal_hypothesis(kernel, scorer, [inl[0], inl[-1]])

        best = local_optimization(kernel, scorer, trial, 300, np.random.default_rng(0))

        assert best.score >= trial.score
        assert best.score == 210
        assert np.array_equal(best.inliers, noisy_line.inliers)
        assert np.allclose(best.model, [-2.0, 0.3], atol=1e-2)

    def test_not_worse_than_trial(self, noisy_line):
        """Whatever the seed, local optimization never lowers the score."""
        kernel = LineKernel(noisy_line.xy)
        scorer = ScoreEvaluator(0.03)
        inl = noisy_line.inliers
        outl = noisy_line.outliers
        trial = _minimal_hypothesis(kernel, scorer, [inl[3], outl[0]])
        for seed in range(5):
            best = local_optimization(kernel, scorer, trial, 300, np.random.default_rng(seed))
            assert best.score >= trial.score

    @pytest.mark.parametrize("kernel_cls", [RaisingRefitKernel, LinAlgRefitKernel])
    def test_refit_degeneracy_is_absorbed(self, clean_line, kernel_cls):
        """Rank-deficient refits keep the unrefined trial-best."""
        kernel = kernel_cls(clean_line.xy)
        scorer = ScoreEvaluator(0.3)
        inl = clean_line.inliers
        trial = _minimal_hypothesis(kernel, scorer, [inl[0], inl[-1]])

        best = local_optimization(kernel, scorer, trial, 300, np.random.default_rng(0))
        assert best is trial

    def test_inner_resampling_disabled(self, noisy_line):
        """lo_inner_repetitions=0 leaves the generator untouched."""
        kernel = LineKernel(noisy_line.xy)
        scorer = ScoreEvaluator(0.03)
        inl = noisy_line.inliers
        trial = _minimal_hypothesis(kernel, scorer, [inl[0], inl[-1]])

        rng = np.random.default_rng(9)
        params = LoRansacParams(lo_inner_repetitions=0)
        local_optimization(kernel, scorer, trial, 300, rng, params)
        assert rng.integers(0, 1_000_000) == np.random.default_rng(9).integers(0, 1_000_000)
