"""Brute-force exact k-NN search baseline."""

from typing import Sequence

import numpy as np

from .distance import l2_distance
from .errors import DimensionMismatch
from .progress import SearchObserver
from .topk import Candidate, TopKSelector, check_k


def select_top_k(
    query: Sequence[float] | np.ndarray,
    database: Sequence[Sequence[float]] | np.ndarray,
    k: int = 10,
    observer: SearchObserver | None = None,
) -> list[Candidate]:
    """Exact k-nearest neighbor search using brute-force Euclidean distance.

    Every database vector is compared to the query in index order; the k
    closest are kept in a bounded max-heap (see TopKSelector for the
    tie-break rule). Neither input is modified.

    Args:
        query: Query vector of length D.
        database: Database vectors, each of length D (list or (n_db, D) array).
        k: Number of neighbors to return.
        observer: Optional observer notified of progress. Its on_error hook
            runs if the search aborts.

    Returns:
        Up to min(k, n_db) candidates sorted by ascending distance.

    Raises:
        InvalidArgument: if k < 1. The database is not scanned.
        DimensionMismatch: if any database vector's length differs from the
            query's. No partial results are returned.
    """
    selector = TopKSelector(check_k(k))
    if observer is None:
        observer = SearchObserver()
    observer.on_start(len(database))

    try:
        for i, vector in enumerate(database):
            try:
                dist = l2_distance(query, vector)
            except DimensionMismatch as e:
                raise DimensionMismatch(e.expected, e.actual, index=i) from e
            admitted = selector.offer(i, dist)
            observer.on_compare(Candidate(i, dist), admitted)
    except Exception as e:
        observer.on_error(e)
        raise

    results = selector.drain()
    observer.on_finish(results)
    return results


# Name used by the demo driver and ground-truth tooling.
brute_force_search = select_top_k
