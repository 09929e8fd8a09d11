"""Bounded top-k selection over a stream of (index, distance) pairs."""

import heapq
from dataclasses import dataclass

import numpy as np

from .errors import InvalidArgument


@dataclass(frozen=True)
class Candidate:
    """A database entry and its distance to the query."""

    index: int
    distance: float


def check_k(k: int) -> int:
    """Validate the number of neighbors to keep."""
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidArgument(f"k must be an integer, got {type(k).__name__}")
    if k < 1:
        raise InvalidArgument(f"k must be >= 1, got {k}")
    return int(k)


class TopKSelector:
    """Keeps the k smallest-distance candidates offered so far.

    Backed by a max-heap (heapq with negated keys) capped at k entries, so the
    heap root is the worst retained candidate. A new candidate replaces the
    root only when its distance is strictly smaller: on a tie with the k-th
    best, the entry seen first wins. Among retained entries sharing the worst
    distance, the larger index sits at the root and is evicted first.

    Args:
        k: Maximum number of candidates to retain (>= 1).
    """

    def __init__(self, k: int):
        self.k = check_k(k)
        self._heap: list[tuple[float, int]] = []  # (-distance, -index)

    def __len__(self) -> int:
        return len(self._heap)

    @property
    def worst(self) -> float | None:
        """Distance of the worst retained candidate, or None when empty."""
        if not self._heap:
            return None
        return -self._heap[0][0]

    def offer(self, index: int, distance: float) -> bool:
        """Offer a candidate; returns True if it was admitted."""
        entry = (-distance, -index)
        if len(self._heap) < self.k:
            heapq.heappush(self._heap, entry)
            return True
        if distance < -self._heap[0][0]:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def drain(self) -> list[Candidate]:
        """Empty the selector and return its candidates closest-first."""
        results = []
        while self._heap:
            neg_dist, neg_idx = heapq.heappop(self._heap)
            results.append(Candidate(index=-neg_idx, distance=-neg_dist))
        results.reverse()
        return results


def as_arrays(results: list[Candidate]) -> tuple[np.ndarray, np.ndarray]:
    """Convert a result set to arrays.

    Returns:
        indices: int32 array of shape (len(results),).
        distances: float32 array of shape (len(results),).
    """
    indices = np.array([c.index for c in results], dtype=np.int32)
    distances = np.array([c.distance for c in results], dtype=np.float32)
    return indices, distances
