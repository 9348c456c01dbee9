"""Brute-force exact k-NN over every fitting vector.

For each fitting vector, in order, the distance row against the whole
reference set is computed in parallel, reduced to ranks 1..k (the single
closest reference vector is always dropped) and emitted.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from ..config import KnnConfig
from ..datasets.neighbors import NeighborWriter
from ..datasets.utils import check_vector_sets
from ..errors import ConfigurationError
from ..evaluation.metrics import frames_per_second, memory_usage_bytes
from ..utils.progress import ProgressReporter
from ..utils.timer import timer
from .distance import Metric
from .engine import DistanceEngine
from .selection import INDEX_DTYPE, effective_k, select_neighbors


def _check_k(k: int) -> None:
    if not isinstance(k, (int, np.integer)) or isinstance(k, bool) or k < 1:
        raise ConfigurationError(f"k must be a positive integer, got {k!r}")


def iter_neighbors(
    fitting: np.ndarray,
    reference: np.ndarray,
    k: int,
    workers: int = 2,
    metric: str | Metric = "euclidean",
    progress: bool = False,
) -> Iterator[tuple[int, np.ndarray, np.ndarray]]:
    """Yield (frame, distances, indices) for each fitting vector in order.

    ``k`` must already be clamped with ``effective_k``.
    """
    row = np.empty(reference.shape[0], dtype=np.float64)
    with DistanceEngine(reference, metric=metric, workers=workers) as engine, \
            ProgressReporter(fitting.shape[0], enabled=progress) as reporter:
        for frame in range(fitting.shape[0]):
            engine.compute(fitting[frame], out=row)
            distances, indices = select_neighbors(row, k)
            yield frame, distances, indices
            reporter.update(frame + 1)


def exhaustive_search(
    fitting: np.ndarray,
    reference: np.ndarray,
    k: int = 10,
    workers: int = 1,
    metric: str | Metric = "euclidean",
) -> tuple[np.ndarray, np.ndarray]:
    """Exact k-NN of every fitting vector, excluding its closest match.

    Args:
        fitting: Query vectors of shape (n_fit, D).
        reference: Reference vectors of shape (n_ref, D).
        k: Number of neighbors requested; clamped to n_ref - 1.
        workers: Threads used for each distance row.
        metric: Metric name, Metric instance or plain function.

    Returns:
        indices: intc array of shape (n_fit, effective_k).
        distances: float64 array of shape (n_fit, effective_k).
    """
    _check_k(k)
    fitting = np.ascontiguousarray(fitting, dtype=np.float64)
    reference = np.ascontiguousarray(reference, dtype=np.float64)
    check_vector_sets(fitting, reference)

    k_eff = effective_k(k, reference.shape[0])
    all_indices = np.empty((fitting.shape[0], k_eff), dtype=INDEX_DTYPE)
    all_distances = np.empty((fitting.shape[0], k_eff), dtype=np.float64)

    for frame, distances, indices in iter_neighbors(fitting, reference, k_eff, workers, metric):
        all_distances[frame] = distances
        all_indices[frame] = indices

    return all_indices, all_distances


def knn_search(
    fitting: np.ndarray,
    reference: np.ndarray,
    k: int,
    distances_out: str | os.PathLike,
    indices_out: str | os.PathLike,
    workers: int = 2,
    metric: str | Metric = "euclidean",
    progress: bool = False,
) -> int:
    """Run the k-NN search and append one record per fitting vector to the
    distance and index files.

    Returns:
        The effective k, i.e. the width of every written record.
    """
    _check_k(k)
    fitting = np.ascontiguousarray(fitting, dtype=np.float64)
    reference = np.ascontiguousarray(reference, dtype=np.float64)
    check_vector_sets(fitting, reference)
    k_eff = effective_k(k, reference.shape[0])

    with NeighborWriter(distances_out, indices_out, k_eff) as writer:
        for _, distances, indices in iter_neighbors(
            fitting, reference, k_eff, workers, metric, progress
        ):
            writer.write(distances, indices)
    return k_eff


@dataclass
class RunSummary:
    """Outcome of a file-to-file run."""

    n_reference: int
    n_fitting: int
    effective_k: int
    load_time: float = 0.0
    search_time: float = 0.0
    frames_per_second: float = 0.0
    memory_bytes: int = 0


def run_search(
    config: KnnConfig,
    reference: np.ndarray,
    fitting: np.ndarray,
    load_time: float = 0.0,
) -> RunSummary:
    """Search already loaded vector sets and write the configured outputs."""
    with timer() as t_search:
        k_eff = knn_search(
            fitting,
            reference,
            config.k,
            config.distance_file,
            config.index_file,
            workers=config.threads,
            metric=config.metric,
            progress=config.progress,
        )

    return RunSummary(
        n_reference=reference.shape[0],
        n_fitting=fitting.shape[0],
        effective_k=k_eff,
        load_time=load_time,
        search_time=t_search.elapsed,
        frames_per_second=frames_per_second(fitting.shape[0], t_search.elapsed),
        memory_bytes=memory_usage_bytes(),
    )
