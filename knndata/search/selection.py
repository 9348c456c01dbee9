"""Partial selection of the nearest neighbors from a finished distance row."""

import numpy as np

INDEX_DTYPE = np.dtype(np.intc)


def effective_k(requested_k: int, n_ref: int) -> int:
    """Number of neighbors reported per frame: k clamped to n_ref - 1."""
    return max(0, min(requested_k, n_ref - 1))


def select_neighbors(row: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
    """Rank the k+1 closest reference vectors and drop the closest one.

    Ordering is by distance, then by reference index, so equal distances
    always come out in index order. NaN distances sort after all numbers.

    Args:
        row: float64 distances of shape (n_ref,), with k + 1 <= n_ref.
        k: Number of neighbors to return.

    Returns:
        distances: float64 array of shape (k,), ranks 1..k in ascending order.
        indices: intc array of shape (k,) with the matching reference indices.
    """
    n = row.shape[0]
    k1 = k + 1
    if k1 > n:
        raise ValueError(f"Cannot select {k1} neighbors from a row of {n} distances")

    if k1 < n:
        kth = np.partition(row, k)[k]
        if np.isnan(kth):
            candidates = np.arange(n)
        else:
            # Every index that could land in the first k + 1 positions
            candidates = np.flatnonzero(row <= kth)
    else:
        candidates = np.arange(n)

    # candidates is in index order, so a stable sort breaks ties by index
    order = np.argsort(row[candidates], kind="stable")
    ranked = candidates[order[:k1]]

    keep = ranked[1:k1]
    return row[keep].astype(np.float64, copy=True), keep.astype(INDEX_DTYPE)
