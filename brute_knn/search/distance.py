"""Euclidean distance between two vectors."""

from typing import Sequence

import numpy as np

from .errors import DimensionMismatch


def l2_distance(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """Compute the L2 distance sqrt(sum((a[i] - b[i])^2)).

    Arithmetic runs in the wider of the two input dtypes, at least float32:
    float32 vectors (e.g. from .fvecs files) stay float32, Python floats and
    float64 arrays keep double precision.

    Args:
        a: Vector of length D.
        b: Vector of length D.

    Returns:
        Non-negative distance as a Python float.

    Raises:
        DimensionMismatch: if len(a) != len(b).
    """
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))
    a = np.asarray(a)
    b = np.asarray(b)
    dtype = np.result_type(a, b, np.float32)
    diff = a.astype(dtype, copy=False) - b.astype(dtype, copy=False)
    return float(np.sqrt(np.dot(diff, diff)))
