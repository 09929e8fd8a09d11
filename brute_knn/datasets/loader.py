"""Vector sources for a single search: .fvecs file pairs and ann-benchmarks HDF5 files.

The HDF5 files (http://ann-benchmarks.com) hold a `train` matrix used as the
database, a `test` matrix of queries and the exact `neighbors`/`distances` for
each query against the full train set.
"""

from dataclasses import dataclass
from pathlib import Path

import h5py
import numpy as np
import requests
from tqdm import tqdm

from .fvecs import read_fvecs

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"
ANN_BENCHMARKS_URL = "http://ann-benchmarks.com"

# Euclidean ann-benchmarks datasets, by name -> HDF5 file stem
DATASETS = {
    "sift-128": "sift-128-euclidean",
    "gist-960": "gist-960-euclidean",
    "fashion-mnist-784": "fashion-mnist-784-euclidean",
    "mnist-784": "mnist-784-euclidean",
}


@dataclass
class SearchInputs:
    """A database, one query and, when known, the exact answer for that query.

    neighbors/distances are the ground-truth indices and L2 distances, closest
    first. They are None when the database is a prefix of the full collection,
    since the stored answers refer to the full collection.
    """

    database: np.ndarray | list[np.ndarray]
    query: np.ndarray
    neighbors: np.ndarray | None = None
    distances: np.ndarray | None = None

    @property
    def has_ground_truth(self) -> bool:
        return self.neighbors is not None


def dataset_path(name: str, data_dir: Path | None = None) -> Path:
    """Local path of a dataset's HDF5 file (which may not exist yet)."""
    if name not in DATASETS:
        raise ValueError(f"Unknown dataset '{name}'. Available: {list_datasets()}")
    return Path(data_dir or DATA_DIR) / f"{DATASETS[name]}.hdf5"


def fetch_dataset(name: str, data_dir: Path | None = None) -> Path:
    """Return the cached HDF5 file for a dataset, downloading it on first use."""
    filepath = dataset_path(name, data_dir)
    if filepath.exists():
        return filepath

    filepath.parent.mkdir(parents=True, exist_ok=True)
    url = f"{ANN_BENCHMARKS_URL}/{filepath.name}"
    print(f"Downloading {name} from {url}...")
    response = requests.get(url, stream=True, timeout=30)
    response.raise_for_status()

    # Only a complete download is renamed to the cached filename
    partial = filepath.with_suffix(".hdf5.part")
    total = int(response.headers.get("content-length", 0))
    with open(partial, "wb") as f, tqdm(total=total, unit="B", unit_scale=True, desc=name) as pbar:
        for chunk in response.iter_content(chunk_size=1 << 16):
            f.write(chunk)
            pbar.update(len(chunk))
    partial.rename(filepath)
    return filepath


def load_hdf5_inputs(
    name: str,
    n_base: int | None = None,
    query_index: int = 0,
    data_dir: Path | None = None,
) -> SearchInputs:
    """Load the first n_base train vectors and one test query of a dataset.

    Only the requested rows are read from disk.

    Raises:
        ValueError: for an unknown dataset.
        IndexError: if query_index is out of range.
    """
    with h5py.File(fetch_dataset(name, data_dir), "r") as f:
        n_train = f["train"].shape[0]
        n_queries = f["test"].shape[0]
        if not 0 <= query_index < n_queries:
            raise IndexError(f"{name}: query index {query_index} out of range [0, {n_queries})")

        n_base = n_train if n_base is None else min(n_base, n_train)
        inputs = SearchInputs(
            database=np.asarray(f["train"][:n_base], dtype=np.float32),
            query=np.asarray(f["test"][query_index], dtype=np.float32),
        )
        if n_base == n_train:
            inputs.neighbors = np.asarray(f["neighbors"][query_index], dtype=np.int32)
            inputs.distances = np.asarray(f["distances"][query_index], dtype=np.float32)
    return inputs


def load_fvecs_inputs(
    base_path: str | Path,
    query_path: str | Path,
    n_base: int | None = None,
    query_index: int = 0,
) -> SearchInputs:
    """Load a database and one query from .fvecs files (e.g. sift_base/sift_query).

    Raises:
        ValueError: if the base file holds no vectors or the query file has no
            vector at query_index.
    """
    database = read_fvecs(base_path, n_base)
    if not database:
        raise ValueError(f"{base_path}: no database vectors")
    queries = read_fvecs(query_path, query_index + 1)
    if query_index >= len(queries):
        raise ValueError(f"{query_path}: no query at index {query_index}")
    return SearchInputs(database=database, query=queries[query_index])


def list_datasets() -> list[str]:
    """Return available dataset names."""
    return list(DATASETS.keys())
