"""Dataset utility functions: stats and console previews."""

from typing import Sequence

import numpy as np


def dataset_stats(vectors: Sequence[Sequence[float]] | np.ndarray) -> dict:
    """Compute basic statistics for a vector collection.

    Args:
        vectors: List of vectors or array of shape (n, D).

    Returns:
        Dict with keys: n, D, mean_norm, std_norm, min_norm, max_norm.
        D is None when the vectors do not share a dimension; norm stats are
        0.0 for an empty collection.
    """
    if isinstance(vectors, np.ndarray) and vectors.ndim == 2:
        dims = {vectors.shape[1]}
        norms = np.linalg.norm(vectors, axis=1)
    else:
        dims = {len(v) for v in vectors}
        norms = np.array([np.linalg.norm(np.asarray(v, dtype=np.float32)) for v in vectors])
    if norms.size == 0:
        norms = np.zeros(1)
    return {
        "n": len(vectors),
        "D": dims.pop() if len(dims) == 1 else None,
        "mean_norm": float(np.mean(norms)),
        "std_norm": float(np.std(norms)),
        "min_norm": float(np.min(norms)),
        "max_norm": float(np.max(norms)),
    }


def preview(vector: Sequence[float] | np.ndarray, n: int = 5) -> str:
    """Render the first n values of a vector, e.g. "[1, 2.5, 3, ...]"."""
    head = ", ".join(f"{float(x):g}" for x in list(vector)[:n])
    if len(vector) > n:
        head += ", ..."
    return f"[{head}]"
