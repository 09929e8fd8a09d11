"""Timing context manager for search reports."""

import time
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class TimingResult:
    """Elapsed wall-clock time, filled in when the timed block exits."""

    elapsed: float = 0.0

    @property
    def millis(self) -> float:
        return self.elapsed * 1000.0


@contextmanager
def timer():
    """Measure the wall-clock time of a block in seconds.

    Usage:
        with timer() as t:
            results = select_top_k(query, database, k=10)
        print(f"Search took {t.millis:.2f} ms")
    """
    result = TimingResult()
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start
