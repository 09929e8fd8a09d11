"""Evaluation metrics: recall@k, QPS, memory usage."""

from typing import Sequence

import numpy as np
import psutil


def recall_at_k(
    predicted: Sequence[int] | np.ndarray,
    ground_truth: Sequence[int] | np.ndarray,
    k: int | None = None,
) -> float:
    """Compute recall@k for a single query.

    Args:
        predicted: Predicted neighbor indices, closest first.
        ground_truth: True neighbor indices, closest first.
        k: Number of neighbors to consider. If None, uses min(len(predicted), len(ground_truth)).

    Returns:
        Fraction of the top-k ground-truth indices found in the top-k predictions.
        1.0 when there is nothing to recall.
    """
    if k is None:
        k = min(len(predicted), len(ground_truth))

    gt_set = set(np.asarray(ground_truth)[:k].tolist())
    if not gt_set:
        return 1.0
    pred_set = set(np.asarray(predicted)[:k].tolist())
    return len(pred_set & gt_set) / len(gt_set)


def distance_error(predicted: np.ndarray, ground_truth: np.ndarray) -> float:
    """Largest absolute difference between predicted and ground-truth distances."""
    n = min(len(predicted), len(ground_truth))
    if n == 0:
        return 0.0
    diff = np.asarray(predicted[:n], dtype=np.float64) - np.asarray(ground_truth[:n], dtype=np.float64)
    return float(np.max(np.abs(diff)))


def queries_per_second(n_queries: int, elapsed_seconds: float) -> float:
    """Compute queries per second.

    Args:
        n_queries: Number of queries processed.
        elapsed_seconds: Wall-clock time in seconds.

    Returns:
        QPS value.
    """
    if elapsed_seconds <= 0:
        return float("inf")
    return n_queries / elapsed_seconds


def memory_usage_bytes() -> int:
    """Return current process RSS memory in bytes."""
    return psutil.Process().memory_info().rss
