"""
Problem kernels for the LO-RANSAC engine
"""
from .line import fit_line_minimal, fit_line_least_squares, residuals_line
from .line_kernel import LineKernel
from .affine import fit_affine_minimal, fit_affine_least_squares, apply_T, residuals_L2
from .affine_kernel import AffineKernel
from .translation import (
    make_translation, fit_translation_minimal, fit_translation_least_squares, residuals_L2_translation,
)
from .translation_kernel import TranslationKernel

__all__ = [
    "fit_line_minimal", "fit_line_least_squares", "residuals_line",
    "LineKernel",
    "fit_affine_minimal", "fit_affine_least_squares", "apply_T", "residuals_L2",
    "AffineKernel",
    "make_translation", "fit_translation_minimal", "fit_translation_least_squares", "residuals_L2_translation",
    "TranslationKernel",
]
