"""Parallel distance rows: one query against a whole reference set."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .distance import Metric, get_metric

# Reference rows handed to one task are capped at this many bytes
BLOCK_BYTES = 4 * 2 ** 20


def block_rows(dim: int, block_bytes: int = BLOCK_BYTES) -> int:
    """Number of float64 reference rows that fit in ``block_bytes``."""
    return max(1, block_bytes // (max(dim, 1) * 8))


def split_range(n: int, size: int) -> list[tuple[int, int]]:
    """Split [0, n) into contiguous slices of ``size`` (the last may be shorter)."""
    return [(lo, min(lo + size, n)) for lo in range(0, n, size)]


class DistanceEngine:
    """Computes distance rows with a bounded pool of worker threads.

    The reference set is cut into fixed-size row blocks. Each task evaluates
    the metric over one block and writes only that block's part of the output
    row, so temporaries stay bounded by ``workers * block_bytes`` whatever the
    size of the reference set. Block boundaries do not depend on the worker
    count. ``compute`` returns after every block is done.

    Usage:
        with DistanceEngine(reference, workers=4) as engine:
            for query in fitting:
                row = engine.compute(query)
    """

    def __init__(
        self,
        reference: np.ndarray,
        metric: str | Metric = "euclidean",
        workers: int = 2,
        block_bytes: int = BLOCK_BYTES,
    ):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.reference = reference
        self.metric = get_metric(metric)
        self.workers = workers
        self.slices = split_range(reference.shape[0], block_rows(reference.shape[1], block_bytes))
        parallel = workers > 1 and len(self.slices) > 1
        self._pool = ThreadPoolExecutor(max_workers=workers) if parallel else None

    def _fill(self, query: np.ndarray, row: np.ndarray, start: int, stop: int) -> None:
        row[start:stop] = self.metric.distances(query, self.reference[start:stop])

    def compute(self, query: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """Distance from ``query`` to every reference vector.

        Args:
            query: Vector of shape (D,).
            out: Optional float64 buffer of shape (n_ref,) to fill.

        Returns:
            float64 array of shape (n_ref,); ``out`` if it was given.
        """
        row = np.empty(self.reference.shape[0], dtype=np.float64) if out is None else out

        if self._pool is None:
            for start, stop in self.slices:
                self._fill(query, row, start, stop)
            return row

        futures = [
            self._pool.submit(self._fill, query, row, start, stop)
            for start, stop in self.slices
        ]
        # Barrier: wait for every slice, re-raising the first failure
        for future in futures:
            future.result()
        return row

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "DistanceEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
