"""
loransac: Locally Optimized RANSAC with pluggable problem kernels.
"""
import logging

from .ransac import (
    ProblemKernel, Hypothesis, RansacResult, LoRansacParams,
    LoRansacError, InsufficientDataError, NoValidModelError, RefitDegeneracy,
    lo_ransac, estimate, required_iterations, inverse_square_weights,
)
from .kernels import LineKernel, AffineKernel, TranslationKernel

# Library logging stays silent unless the application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ProblemKernel", "Hypothesis", "RansacResult", "LoRansacParams",
    "LoRansacError", "InsufficientDataError", "NoValidModelError", "RefitDegeneracy",
    "lo_ransac", "estimate", "required_iterations", "inverse_square_weights",
    "LineKernel", "AffineKernel", "TranslationKernel",
]
