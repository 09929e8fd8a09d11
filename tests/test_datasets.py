"""Tests for vector sources: .fvecs files, HDF5 datasets and dataset utils."""

import h5py
import numpy as np
import pytest

from brute_knn.datasets.fvecs import read_fvecs, write_fvecs
from brute_knn.datasets.loader import (
    DATASETS,
    dataset_path,
    fetch_dataset,
    list_datasets,
    load_fvecs_inputs,
    load_hdf5_inputs,
)
from brute_knn.datasets.utils import dataset_stats, preview
from brute_knn.search.errors import DimensionMismatch
from brute_knn.search.exhaustive import select_top_k


@pytest.fixture
def sift_like(tmp_path):
    rng = np.random.default_rng(7)
    base = rng.uniform(0, 255, size=(50, 128)).astype(np.float32)
    queries = rng.uniform(0, 255, size=(3, 128)).astype(np.float32)
    base_path = write_fvecs(tmp_path / "sift_base.fvecs", base)
    query_path = write_fvecs(tmp_path / "sift_query.fvecs", queries)
    return base, queries, base_path, query_path


class TestFvecs:
    def test_read_matches_written(self, sift_like):
        base, _, base_path, _ = sift_like
        vectors = read_fvecs(base_path)
        assert len(vectors) == 50
        assert all(v.dtype == np.float32 for v in vectors)
        np.testing.assert_array_equal(np.stack(vectors), base)

    def test_file_layout(self, tmp_path):
        path = write_fvecs(tmp_path / "one.fvecs", [[1.0, 2.0]])
        raw = path.read_bytes()
        assert len(raw) == 4 + 2 * 4
        assert np.frombuffer(raw[:4], dtype="<i4")[0] == 2
        np.testing.assert_array_equal(np.frombuffer(raw[4:], dtype="<f4"), [1.0, 2.0])

    def test_max_vectors(self, sift_like):
        base, _, base_path, _ = sift_like
        vectors = read_fvecs(base_path, max_vectors=10)
        assert len(vectors) == 10
        np.testing.assert_array_equal(vectors[9], base[9])

    def test_non_positive_max_reads_all(self, sift_like):
        _, _, base_path, _ = sift_like
        assert len(read_fvecs(base_path, max_vectors=0)) == 50
        assert len(read_fvecs(base_path, max_vectors=-1)) == 50

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.fvecs"
        path.write_bytes(b"")
        assert read_fvecs(path) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_fvecs(tmp_path / "nope.fvecs")

    def test_truncated_payload(self, tmp_path):
        path = write_fvecs(tmp_path / "t.fvecs", [[1.0, 2.0, 3.0]])
        path.write_bytes(path.read_bytes()[:-2])
        with pytest.raises(ValueError, match="truncated payload"):
            read_fvecs(path)

    def test_truncated_header(self, tmp_path):
        path = write_fvecs(tmp_path / "t.fvecs", [[1.0]])
        path.write_bytes(path.read_bytes() + b"\x01\x00")
        with pytest.raises(ValueError, match="truncated dimension header"):
            read_fvecs(path)

    def test_oversized_dimension_header(self, tmp_path):
        path = tmp_path / "huge.fvecs"
        path.write_bytes(np.array([2**31 - 1], dtype="<i4").tobytes() + b"\x00" * 8)
        with pytest.raises(ValueError, match="expected 2147483647 floats, got 2"):
            read_fvecs(path)

    def test_negative_dimension(self, tmp_path):
        path = tmp_path / "neg.fvecs"
        path.write_bytes(np.array([-3], dtype="<i4").tobytes())
        with pytest.raises(ValueError, match="invalid dimension"):
            read_fvecs(path)

    def test_mixed_dimensions_detected_at_search(self, tmp_path):
        path = write_fvecs(tmp_path / "mixed.fvecs", [[0.0, 0.0], [1.0, 1.0, 1.0]])
        vectors = read_fvecs(path)
        assert [len(v) for v in vectors] == [2, 3]
        with pytest.raises(DimensionMismatch):
            select_top_k(vectors[0], vectors, k=1)


@pytest.fixture
def hdf5_dataset(tmp_path):
    """A tiny sift-128 stand-in whose ground truth is computed by brute force."""
    rng = np.random.default_rng(3)
    train = rng.standard_normal((40, 8)).astype(np.float32)
    test = rng.standard_normal((2, 8)).astype(np.float32)
    neighbors = np.stack([np.argsort(np.linalg.norm(train - q, axis=1))[:5] for q in test])
    distances = np.stack([np.linalg.norm(train[n] - q, axis=1) for n, q in zip(neighbors, test)])
    with h5py.File(dataset_path("sift-128", tmp_path), "w") as f:
        f["train"] = train
        f["test"] = test
        f["neighbors"] = neighbors.astype(np.int64)
        f["distances"] = distances.astype(np.float64)
    return train, test, neighbors


class TestLoader:
    def test_unknown_dataset(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown dataset"):
            fetch_dataset("glove-100", data_dir=tmp_path)

    def test_only_euclidean(self):
        assert "sift-128" in list_datasets()
        assert all(stem.endswith("-euclidean") for stem in DATASETS.values())

    def test_cached_file_not_downloaded(self, tmp_path, hdf5_dataset):
        assert fetch_dataset("sift-128", data_dir=tmp_path) == dataset_path("sift-128", tmp_path)

    def test_full_train_has_ground_truth(self, tmp_path, hdf5_dataset):
        train, test, neighbors = hdf5_dataset
        inputs = load_hdf5_inputs("sift-128", query_index=1, data_dir=tmp_path)
        np.testing.assert_array_equal(inputs.database, train)
        np.testing.assert_array_equal(inputs.query, test[1])
        assert inputs.has_ground_truth
        assert inputs.neighbors.dtype == np.int32
        assert inputs.distances.dtype == np.float32

        results = select_top_k(inputs.query, inputs.database, k=5)
        np.testing.assert_array_equal([c.index for c in results], neighbors[1])
        np.testing.assert_allclose([c.distance for c in results], inputs.distances, rtol=1e-5)

    def test_prefix_has_no_ground_truth(self, tmp_path, hdf5_dataset):
        inputs = load_hdf5_inputs("sift-128", n_base=10, data_dir=tmp_path)
        assert inputs.database.shape == (10, 8)
        assert not inputs.has_ground_truth
        assert inputs.distances is None

    def test_query_index_out_of_range(self, tmp_path, hdf5_dataset):
        with pytest.raises(IndexError, match="query index 2"):
            load_hdf5_inputs("sift-128", query_index=2, data_dir=tmp_path)

    def test_load_fvecs_inputs(self, sift_like):
        base, queries, base_path, query_path = sift_like
        inputs = load_fvecs_inputs(base_path, query_path, n_base=20, query_index=2)
        assert len(inputs.database) == 20
        np.testing.assert_array_equal(inputs.query, queries[2])
        assert not inputs.has_ground_truth

    def test_load_fvecs_inputs_missing_query(self, sift_like):
        _, _, base_path, query_path = sift_like
        with pytest.raises(ValueError, match="no query at index 3"):
            load_fvecs_inputs(base_path, query_path, query_index=3)

    def test_load_fvecs_inputs_empty(self, tmp_path, sift_like):
        _, _, _, query_path = sift_like
        empty = tmp_path / "empty.fvecs"
        empty.write_bytes(b"")
        with pytest.raises(ValueError, match="no database vectors"):
            load_fvecs_inputs(empty, query_path)


class TestDatasetUtils:
    def test_dataset_stats(self):
        X = np.random.randn(100, 10).astype(np.float32)
        stats = dataset_stats(X)
        assert stats["n"] == 100
        assert stats["D"] == 10
        assert stats["mean_norm"] > 0
        assert stats["min_norm"] <= stats["mean_norm"] <= stats["max_norm"]

    def test_dataset_stats_list(self):
        stats = dataset_stats([[3.0, 4.0], [0.0, 0.0]])
        assert stats["D"] == 2
        assert stats["max_norm"] == pytest.approx(5.0)
        assert stats["min_norm"] == 0.0

    def test_dataset_stats_mixed_and_empty(self):
        assert dataset_stats([[1.0], [1.0, 2.0]])["D"] is None
        empty = dataset_stats([])
        assert empty["n"] == 0
        assert empty["D"] is None

    def test_preview(self):
        assert preview([1.0, 2.5, 3.0, 4.0, 5.0, 6.0]) == "[1, 2.5, 3, 4, 5, ...]"
        assert preview([1.0, 2.0]) == "[1, 2]"
