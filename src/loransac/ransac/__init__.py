# Andy Zhao
"""
LO-RANSAC package

This module provides:
- A reusable generic LO-RANSAC implementation
- Typed primitives and the problem kernel interface
- Sampling, scoring and local optimization building blocks
"""

from .types import (
    FloatArray, BoolArray, IndexArray, Points2D, PointsHomog, Mask, Mat3x3, Line2D,
    ProblemKernel, Hypothesis, RansacResult,
    inverse_square_weights, as_homogeneous, is_valid_mat3x3, as_index_array,
)

from .errors import (
    LoRansacError, InsufficientDataError, NoValidModelError, RefitDegeneracy,
)

from .config import LoRansacParams

from .sampler import sample_indices, sample_from

from .scoring import ScoreEvaluator

from .local_opt import irls_refine, local_optimization

from .core import lo_ransac, estimate, required_iterations

__all__ = [
    "FloatArray", "BoolArray", "IndexArray", "Points2D", "PointsHomog", "Mask", "Mat3x3", "Line2D",
    "ProblemKernel", "Hypothesis", "RansacResult",
    "inverse_square_weights", "as_homogeneous", "is_valid_mat3x3", "as_index_array",
    "LoRansacError", "InsufficientDataError", "NoValidModelError", "RefitDegeneracy",
    "LoRansacParams",
    "sample_indices", "sample_from",
    "ScoreEvaluator",
    "irls_refine", "local_optimization",
    "lo_ransac", "estimate", "required_iterations",
]
