"""Read and write vectors in the TEXMEX .fvecs format.

Each record is a little-endian int32 dimension D followed by D little-endian
float32 values. Records are concatenated with no file header.
"""

import os
from pathlib import Path
from typing import Iterable

import numpy as np

_DIM_DTYPE = np.dtype("<i4")
_VALUE_DTYPE = np.dtype("<f4")


def read_fvecs(path: str | Path, max_vectors: int | None = None) -> list[np.ndarray]:
    """Read vectors from an .fvecs file.

    Args:
        path: File to read.
        max_vectors: Stop after this many vectors. None or <= 0 reads all.

    Returns:
        List of float32 arrays, one per record, in file order. Records are not
        required to share a dimension; that is checked when they are compared.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: on a negative dimension header or a truncated record.
    """
    path = Path(path)
    limit = max_vectors if max_vectors and max_vectors > 0 else None

    vectors = []
    with path.open("rb") as f:
        file_size = os.fstat(f.fileno()).st_size
        while limit is None or len(vectors) < limit:
            header = f.read(_DIM_DTYPE.itemsize)
            if not header:
                break
            if len(header) < _DIM_DTYPE.itemsize:
                raise ValueError(
                    f"{path}: truncated dimension header for vector {len(vectors)}"
                )
            dim = int(np.frombuffer(header, dtype=_DIM_DTYPE)[0])
            if dim < 0:
                raise ValueError(f"{path}: invalid dimension {dim} for vector {len(vectors)}")

            # Check the header against the bytes left before reading the payload
            nbytes = dim * _VALUE_DTYPE.itemsize
            remaining = file_size - f.tell()
            if nbytes > remaining:
                raise ValueError(
                    f"{path}: truncated payload for vector {len(vectors)} "
                    f"(expected {dim} floats, got {remaining // _VALUE_DTYPE.itemsize})"
                )
            payload = f.read(nbytes)
            vectors.append(np.frombuffer(payload, dtype=_VALUE_DTYPE).astype(np.float32))

    return vectors


def write_fvecs(path: str | Path, vectors: Iterable[Iterable[float]]) -> Path:
    """Write vectors to an .fvecs file, replacing any existing file.

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        for vec in vectors:
            arr = np.asarray(vec, dtype=_VALUE_DTYPE).ravel()
            f.write(np.array([arr.shape[0]], dtype=_DIM_DTYPE).tobytes())
            f.write(arr.tobytes())
    return path
