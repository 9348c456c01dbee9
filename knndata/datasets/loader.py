"""Load and save raw binary vector files.

The format is a plain memory dump: records of ``D`` float64 values in the
platform's native byte order, concatenated with no header, record count or
delimiter. ``D`` must be known by the reader.
"""

import os
from pathlib import Path

import numpy as np

from ..errors import DataFormatError

VECTOR_DTYPE = np.dtype(np.float64)


def load_vectors(path: str | os.PathLike, dim: int) -> np.ndarray:
    """Load a flat binary vector file.

    Args:
        path: File holding concatenated float64 records.
        dim: Vector length D.

    Returns:
        Read-only float64 array of shape (n, D), C-contiguous.

    Raises:
        DataFormatError: If the file cannot be read or its size is not a
            whole number of records.
    """
    if not isinstance(dim, (int, np.integer)) or isinstance(dim, bool) or dim <= 0:
        raise DataFormatError(f"Vector size must be a positive integer, got {dim!r}")

    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise DataFormatError(f"Cannot read vector file '{path}': {e.strerror or e}") from e

    record_bytes = int(dim) * VECTOR_DTYPE.itemsize
    if len(raw) % record_bytes != 0:
        raise DataFormatError(
            f"'{path}' holds {len(raw)} bytes, which is not a multiple of the "
            f"{record_bytes}-byte record size for vectors of length {dim}"
        )

    # frombuffer over bytes is already read-only
    vectors = np.frombuffer(raw, dtype=VECTOR_DTYPE).reshape(-1, int(dim))
    return vectors


def write_vectors(path: str | os.PathLike, vectors: np.ndarray) -> Path:
    """Write vectors as native float64 records.

    Args:
        path: Destination file, truncated if it exists.
        vectors: Array of shape (n, D).

    Returns:
        Path of the written file.
    """
    vectors = np.asarray(vectors, dtype=VECTOR_DTYPE)
    if vectors.ndim != 2:
        raise ValueError(f"Expected a 2-D array of vectors, got shape {vectors.shape}")
    path = Path(path)
    np.ascontiguousarray(vectors).tofile(path)
    return path


def load_vector_sets(
    reference_path: str | os.PathLike,
    dim: int,
    fitting_path: str | os.PathLike | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Load the reference set and the fitting set for a run.

    When ``fitting_path`` is None or names the reference file, the fitting set
    is the reference set itself.

    Returns:
        reference: (n_ref, D) float64 array.
        fitting: (n_fit, D) float64 array.
    """
    reference = load_vectors(reference_path, dim)
    if reference.shape[0] == 0:
        raise DataFormatError(f"Reference file '{reference_path}' holds no vectors")

    if fitting_path is None or Path(fitting_path) == Path(reference_path):
        return reference, reference

    fitting = load_vectors(fitting_path, dim)
    return reference, fitting
