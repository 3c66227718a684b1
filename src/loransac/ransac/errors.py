"""
Error taxonomy of the LO-RANSAC engine.

Only hard preconditions are raised to the caller. Degenerate samples and
low-confidence runs are reported through RansacResult instead.
"""


class LoRansacError(Exception):
    """Base class for every error raised by the engine."""


class InsufficientDataError(LoRansacError, ValueError):
    """Fewer observations than the kernel needs for one sample."""

    def __init__(self, available: int, required: int):
        self.available = int(available)
        self.required = int(required)
        super().__init__(
            f"Need at least {self.required} observations, got {self.available}"
        )


class NoValidModelError(LoRansacError):
    """Every drawn sample was degenerate, so no model was ever produced."""

    def __init__(self, iterations: int):
        self.iterations = int(iterations)
        super().__init__(
            f"No candidate model produced in {self.iterations} iterations "
            "(all samples degenerate)"
        )


class RefitDegeneracy(LoRansacError):
    """
    A kernel may raise this from fit_least_squares when the subset is
    rank-deficient. Local optimization absorbs it and keeps the previous model.
    """
