"""Distance metrics evaluated from one query vector to a block of vectors."""

from abc import ABC, abstractmethod
from typing import Callable

import numpy as np


class Metric(ABC):
    """Abstract interface for a pointwise distance metric.

    Implementations must be pure: they read ``query`` and ``block`` and
    return a fresh array, so disjoint blocks can be evaluated concurrently.
    """

    name: str = "metric"

    @abstractmethod
    def distances(self, query: np.ndarray, block: np.ndarray) -> np.ndarray:
        """Distance from ``query`` to every row of ``block``.

        Args:
            query: Vector of shape (D,).
            block: Vectors of shape (n, D).

        Returns:
            float64 array of shape (n,).
        """
        ...

    def __call__(self, a: np.ndarray, b: np.ndarray) -> float:
        """Distance between two single vectors."""
        return float(self.distances(np.asarray(a), np.asarray(b)[np.newaxis, :])[0])


class Euclidean(Metric):
    """sqrt(sum((query - x) ** 2)) for each row x."""

    name = "euclidean"

    def distances(self, query: np.ndarray, block: np.ndarray) -> np.ndarray:
        diff = block - query
        np.multiply(diff, diff, out=diff)
        # Row-wise reduction: each row's sum is independent of the block size
        return np.sqrt(np.sum(diff, axis=1))


class PointwiseMetric(Metric):
    """Adapt a plain function ``f(a, b) -> float`` to a Metric.

    The function is applied row by row, so it is much slower than a
    vectorized metric, but anything returning a float works.
    """

    def __init__(self, func: Callable[[np.ndarray, np.ndarray], float], name: str | None = None):
        self.func = func
        self.name = name or getattr(func, "__name__", "pointwise")

    def distances(self, query: np.ndarray, block: np.ndarray) -> np.ndarray:
        out = np.empty(block.shape[0], dtype=np.float64)
        for i in range(block.shape[0]):
            out[i] = self.func(query, block[i])
        return out


METRICS = {
    "euclidean": Euclidean,
}


def get_metric(metric: str | Metric | Callable) -> Metric:
    """Resolve a metric name, Metric instance or plain function to a Metric."""
    if isinstance(metric, Metric):
        return metric
    if isinstance(metric, str):
        if metric not in METRICS:
            raise ValueError(f"Unknown metric '{metric}'. Available: {list(METRICS.keys())}")
        return METRICS[metric]()
    if callable(metric):
        return PointwiseMetric(metric)
    raise TypeError(f"Cannot use {metric!r} as a distance metric")
