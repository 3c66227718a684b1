# Andy Zhao
"""
Uniform sampling of distinct observation indices.

Partial Fisher-Yates shuffle:
    pool = [0, 1, ..., n-1]
    for i in 0..k-1:
        j = uniform integer in [i, n)
        swap pool[i], pool[j]
    sample = pool[:k]

Every k-subset is equally likely and no index can be drawn twice, so there
is nothing to reject. Only sequential draws from the caller's Generator are
used, which keeps the whole run reproducible from the generator state.
"""
from __future__ import annotations

import numpy as np

from .errors import InsufficientDataError
from .types import IndexArray, as_index_array


def sample_indices(n: int, k: int, rng: np.random.Generator) -> IndexArray:
    """
    Draw k distinct indices uniformly from [0, n), without replacement.

    Raises:
    - InsufficientDataError if k > n
    - ValueError if k < 1
    """
    n = int(n)
    k = int(k)
    if k < 1:
        raise ValueError(f"sample size must be >= 1, got {k}")
    if k > n:
        raise InsufficientDataError(available=n, required=k)

    pool = np.arange(n, dtype=np.int64)
    for i in range(k):
        j = int(rng.integers(i, n))
        if j != i:
            pool[i], pool[j] = pool[j], pool[i]
    return pool[:k].copy()


def sample_from(pool: IndexArray, k: int, rng: np.random.Generator) -> IndexArray:
    """
    Draw k distinct members of an explicit index pool (e.g., the current inliers).
    """
    pool = as_index_array(pool)
    picks = sample_indices(pool.shape[0], k, rng)
    return pool[picks]
