"""Exceptions raised by the exhaustive search core."""


class SearchError(Exception):
    """Base class for search failures."""


class InvalidArgument(SearchError, ValueError):
    """Raised for search parameters outside their domain (e.g. k < 1)."""


class DimensionMismatch(SearchError, ValueError):
    """Raised when two vectors being compared have different lengths.

    Args:
        expected: Length of the reference vector (the query during a search).
        actual: Length of the other vector.
        index: Database index of the offending vector, if known.
    """

    def __init__(self, expected: int, actual: int, index: int | None = None):
        self.expected = expected
        self.actual = actual
        self.index = index
        where = f" at database index {index}" if index is not None else ""
        super().__init__(
            f"Dimension mismatch{where}: expected {expected}, got {actual}"
        )
