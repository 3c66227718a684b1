"""Tests for the line, affine and translation kernels."""

import numpy as np
import pytest

from loransac import AffineKernel, LineKernel, TranslationKernel, inverse_square_weights, lo_ransac
from loransac.kernels import (
    apply_T, fit_affine_least_squares, fit_affine_minimal,
    fit_line_least_squares, fit_line_minimal, residuals_line,
    fit_translation_least_squares, make_translation,
)
from loransac.synth import make_correspondences

T_AFFINE = np.array(
    [[1.05, 0.02, 15.0],
     [-0.01, 0.98, -8.0],
     [0.0, 0.0, 1.0]],
    dtype=np.float64,
)


class TestWeights:
    """Test the default reweighting policy."""

    def test_inverse_square(self):
        r = np.array([0.0, 1e-4, 0.1, 2.0])
        w = inverse_square_weights(r, eps=1e-3)
        assert w == pytest.approx([1e6, 1e6, 100.0, 0.25])

    def test_eps_must_be_positive(self):
        with pytest.raises(ValueError):
            inverse_square_weights(np.array([1.0]), eps=0.0)

    def test_kernel_weights_align_with_inliers(self):
        xy = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.5], [3.0, 3.0]])
        kernel = LineKernel(xy)
        inliers = np.array([0, 2], dtype=np.int64)
        w = kernel.compute_weights(np.array([1.0, 0.0]), inliers)
        assert w.shape == (2,)
        assert w == pytest.approx([1e6, 4.0])


class TestLine:
    """Test line fitting functions."""

    def test_minimal(self):
        model = fit_line_minimal(np.array([[0.0, 6.3], [2.0, 2.3]]))
        assert model == pytest.approx([-2.0, 6.3])

    def test_minimal_degenerate(self):
        assert fit_line_minimal(np.array([[1.0, 0.0], [1.0, 5.0]])) is None
        assert LineKernel(np.array([[1.0, 0.0], [1.0, 5.0]])).fit_minimal(np.array([0, 1])) == []

    def test_minimal_shape(self):
        with pytest.raises(ValueError):
            fit_line_minimal(np.zeros((3, 2)))

    def test_least_squares(self):
        x = np.arange(10.0)
        pts = np.column_stack([x, 0.5 * x + 2.0])
        assert fit_line_least_squares(pts) == pytest.approx([0.5, 2.0])

    def test_uniform_weights_match_unweighted(self):
        rng = np.random.default_rng(0)
        x = np.arange(20.0)
        pts = np.column_stack([x, 0.5 * x + rng.normal(0.0, 0.1, 20)])
        a = fit_line_least_squares(pts)
        b = fit_line_least_squares(pts, np.full(20, 7.0))
        assert a == pytest.approx(b)

    def test_zero_weight_removes_point(self):
        x = np.arange(6.0)
        y = 2.0 * x + 1.0
        y[3] += 100.0
        pts = np.column_stack([x, y])
        w = np.ones(6)
        w[3] = 0.0
        assert fit_line_least_squares(pts, w) == pytest.approx([2.0, 1.0])

    def test_rank_deficient(self):
        pts = np.array([[1.0, 0.0], [1.0, 1.0], [1.0, 2.0]])
        assert fit_line_least_squares(pts) is None

    def test_bad_weights(self):
        pts = np.array([[0.0, 0.0], [1.0, 1.0]])
        with pytest.raises(ValueError):
            fit_line_least_squares(pts, np.array([1.0]))
        with pytest.raises(ValueError):
            fit_line_least_squares(pts, np.array([1.0, -1.0]))

    def test_residuals(self):
        pts = np.array([[0.0, 1.0], [1.0, 5.0]])
        assert residuals_line(np.array([2.0, 1.0]), pts) == pytest.approx([0.0, 2.0])

    def test_kernel_constants(self):
        assert LineKernel.minimum_samples == 2
        assert LineKernel.minimum_lssamples == 2

    def test_kernel_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            LineKernel(np.zeros((4, 3)))


class TestAffine:
    """Test affine fitting functions and kernel."""

    def test_minimal_recovers_transform(self):
        pts0 = np.array([[0.0, 0.0], [100.0, 0.0], [0.0, 50.0]])
        pts1 = apply_T(T_AFFINE, pts0)
        assert np.allclose(fit_affine_minimal(pts0, pts1), T_AFFINE)

    def test_minimal_collinear(self):
        pts0 = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0]])
        assert fit_affine_minimal(pts0, apply_T(T_AFFINE, pts0)) is None

    def test_weighted_least_squares(self):
        rng = np.random.default_rng(1)
        pts0 = rng.uniform(0, 100, size=(20, 2))
        pts1 = apply_T(T_AFFINE, pts0)
        pts1[0] += 50.0
        w = np.ones(20)
        w[0] = 0.0
        assert np.allclose(fit_affine_least_squares(pts0, pts1, w), T_AFFINE)

    def test_least_squares_rank_deficient(self):
        pts0 = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
        assert fit_affine_least_squares(pts0, pts0.copy()) is None

    def test_kernel_residuals_subset(self):
        pts0 = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        pts1 = pts0 + np.array([[0.0, 0.0], [3.0, 4.0], [0.0, 0.0]])
        kernel = AffineKernel(pts0, pts1)
        assert kernel.residuals(np.eye(3), np.array([1])) == pytest.approx([5.0])
        assert kernel.residuals(np.eye(3)).shape == (3,)

    def test_kernel_mismatched_shapes(self):
        with pytest.raises(ValueError):
            AffineKernel(np.zeros((3, 2)), np.zeros((4, 2)))

    def test_lo_ransac_affine(self):
        """Noise-free correspondences: exact transform and inlier set."""
        rng = np.random.default_rng(2)
        data = make_correspondences(T_AFFINE, 100, 0.3, rng)
        res = lo_ransac(AffineKernel(data.pts0, data.pts1), threshold=1.0, rng=rng)
        assert np.allclose(res.model, T_AFFINE, atol=1e-6)
        assert np.array_equal(res.inliers, data.inliers)


class TestTranslation:
    """Test translation fitting functions and kernel."""

    def test_weighted_mean(self):
        pts0 = np.zeros((3, 2))
        pts1 = np.array([[1.0, 0.0], [3.0, 0.0], [100.0, 100.0]])
        T = fit_translation_least_squares(pts0, pts1, np.array([1.0, 1.0, 0.0]))
        assert T[0, 2] == pytest.approx(2.0)
        assert T[1, 2] == pytest.approx(0.0)

    def test_zero_weights(self):
        pts = np.zeros((2, 2))
        assert fit_translation_least_squares(pts, pts, np.zeros(2)) is None

    def test_lo_ransac_translation(self):
        rng = np.random.default_rng(3)
        data = make_correspondences(make_translation(4.0, -2.5), 150, 0.4, rng, noise_sigma=0.5)
        res = lo_ransac(TranslationKernel(data.pts0, data.pts1), threshold=2.0, rng=rng)
        assert res.model[0, 2] == pytest.approx(4.0, abs=0.2)
        assert res.model[1, 2] == pytest.approx(-2.5, abs=0.2)
        assert res.num_inliers == 90
