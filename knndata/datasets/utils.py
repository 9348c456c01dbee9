"""Dataset utility functions: stats and shape checks."""

import numpy as np

from ..errors import DataFormatError


def dataset_stats(X: np.ndarray) -> dict:
    """Compute basic statistics for a vector set.

    Args:
        X: Data matrix of shape (n, D).

    Returns:
        Dict with keys: n, D, mean_norm, std_norm, min_norm, max_norm.
        Norm statistics are 0.0 for an empty set.
    """
    if X.shape[0] == 0:
        return {"n": 0, "D": X.shape[1], "mean_norm": 0.0, "std_norm": 0.0,
                "min_norm": 0.0, "max_norm": 0.0}
    norms = np.linalg.norm(X, axis=1)
    return {
        "n": X.shape[0],
        "D": X.shape[1],
        "mean_norm": float(np.mean(norms)),
        "std_norm": float(np.std(norms)),
        "min_norm": float(np.min(norms)),
        "max_norm": float(np.max(norms)),
    }


def check_vector_sets(fitting: np.ndarray, reference: np.ndarray) -> None:
    """Raise DataFormatError unless both sets are 2-D with the same D and
    the reference set is non-empty."""
    if fitting.ndim != 2 or reference.ndim != 2:
        raise DataFormatError(
            f"Vector sets must be 2-D, got shapes {fitting.shape} and {reference.shape}"
        )
    if fitting.shape[1] != reference.shape[1]:
        raise DataFormatError(
            f"Dimension mismatch: fitting D={fitting.shape[1]} vs reference D={reference.shape[1]}"
        )
    if reference.shape[0] == 0:
        raise DataFormatError("Reference set holds no vectors")
