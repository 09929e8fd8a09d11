#!/usr/bin/env python
"""Brute-force vector search demo: load a database and a query, print the top-k."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse

import requests

from brute_knn.datasets.loader import list_datasets, load_fvecs_inputs, load_hdf5_inputs
from brute_knn.datasets.utils import dataset_stats, preview
from brute_knn.evaluation.metrics import (
    distance_error,
    memory_usage_bytes,
    queries_per_second,
    recall_at_k,
)
from brute_knn.search.errors import SearchError
from brute_knn.search.exhaustive import brute_force_search
from brute_knn.search.progress import DecileProgressObserver, TqdmProgressObserver
from brute_knn.search.topk import as_arrays
from brute_knn.utils.timer import timer

DEFAULT_NUM_BASE_VECTORS = 100
DEFAULT_K = 10


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Brute force k-NN search demo")
    parser.add_argument(
        "n_db", nargs="?", type=int, default=DEFAULT_NUM_BASE_VECTORS,
        help="Number of database vectors to load",
    )
    parser.add_argument("--k", type=int, default=DEFAULT_K, help="Number of neighbors")
    parser.add_argument("--base", default="sift_base.fvecs", help="Database .fvecs file")
    parser.add_argument("--query", default="sift_query.fvecs", help="Query .fvecs file")
    parser.add_argument(
        "--dataset", default=None, choices=list_datasets(),
        help="Use an ann-benchmarks HDF5 dataset instead of .fvecs files",
    )
    parser.add_argument("--query-index", type=int, default=0, help="Which query to run")
    parser.add_argument(
        "--full", action="store_true",
        help="Search the whole collection (enables the ground-truth check for --dataset)",
    )
    parser.add_argument(
        "--progress", choices=["lines", "bar", "none"], default="lines",
        help="Search progress reporting style",
    )
    args = parser.parse_args(argv)

    if args.n_db <= 0:
        print(
            f"Error: Invalid number of vectors. Using default ({DEFAULT_NUM_BASE_VECTORS}).",
            file=sys.stderr,
        )
        args.n_db = DEFAULT_NUM_BASE_VECTORS
    return args


def load_inputs(args):
    """Load the database and query selected on the command line."""
    n_base = None if args.full else args.n_db
    scope = "all" if n_base is None else f"first {n_base}"
    if args.dataset is not None:
        print(f"Loading {args.dataset} ({scope} train vectors)")
        return load_hdf5_inputs(args.dataset, n_base=n_base, query_index=args.query_index)

    print(f"Reading {scope} vectors from {args.base}")
    return load_fvecs_inputs(args.base, args.query, n_base=n_base, query_index=args.query_index)


def main(argv=None):
    args = parse_args(argv)

    print("=" * 40)
    print("Brute Force Vector Search Demo")
    print("=" * 40)

    print("\n[Step 1] Loading vectors...")
    try:
        inputs = load_inputs(args)
    except (OSError, ValueError, IndexError, requests.RequestException) as e:
        print(f"Failed to load vectors: {e}", file=sys.stderr)
        return 1
    database, query = inputs.database, inputs.query

    stats = dataset_stats(database)
    print(f" Loaded {stats['n']} vectors")
    print(f" Each vector has {stats['D'] if stats['D'] is not None else 'mixed'} dimensions")
    print(f" Loaded query vector (dimension: {len(query)})")
    print(f"  First 5 values: {preview(query)}")

    print("\n[Step 2] Performing brute force search...")
    print(f"Finding top {args.k} nearest neighbors")
    observer = None
    if args.progress == "lines":
        observer = DecileProgressObserver()
    elif args.progress == "bar":
        observer = TqdmProgressObserver()

    try:
        with timer() as t:
            results = brute_force_search(query, database, k=args.k, observer=observer)
    except SearchError as e:
        print(f"Search failed: {e}", file=sys.stderr)
        return 1

    print("\n[Step 3] Results!")
    print("=" * 40)
    print(f"Top {args.k} Nearest Neighbors:")
    print("=" * 40)
    for rank, c in enumerate(results, start=1):
        print(f"Rank {rank}: Vector #{c.index} (distance: {c.distance:g})")

    print(f"\nSearch time: {t.millis:.2f} ms")
    print(f"Queries per second: {queries_per_second(1, t.elapsed):.1f}")
    print(f"Process memory: {memory_usage_bytes() / (1024 * 1024):.1f} MB")

    if inputs.has_ground_truth:
        indices, distances = as_arrays(results)
        print(f"Recall@{len(results)} vs ground truth: {recall_at_k(indices, inputs.neighbors):.3f}")
        print(f"Max distance error: {distance_error(distances, inputs.distances):.6f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
