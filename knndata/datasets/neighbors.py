"""Write and read k-NN result files.

Two parallel files, one fixed-width record per fitting vector and no header:
  - distances: k native float64 values, ascending.
  - indices:   k native C ``int`` values (numpy.intc), 0-based reference rows.
"""

import os
from pathlib import Path

import numpy as np

from ..errors import DataFormatError
from ..search.selection import INDEX_DTYPE
from .loader import VECTOR_DTYPE


class NeighborWriter:
    """Append neighbor records to a distance file and an index file.

    Both files are truncated on open. Records are written as they arrive, so
    if a run fails part way the files hold every record written before it.
    """

    def __init__(self, distance_path: str | os.PathLike, index_path: str | os.PathLike, k: int):
        self.distance_path = Path(distance_path)
        self.index_path = Path(index_path)
        self.k = k
        self.records = 0
        self._distances = None
        self._indices = None

    def open(self) -> "NeighborWriter":
        self._distances = open(self.distance_path, "wb")
        try:
            self._indices = open(self.index_path, "wb")
        except OSError:
            self._distances.close()
            self._distances = None
            raise
        return self

    def write(self, distances: np.ndarray, indices: np.ndarray) -> None:
        """Append one frame's record to both files."""
        if self._distances is None:
            raise RuntimeError("NeighborWriter is not open")
        distances = np.ascontiguousarray(distances, dtype=VECTOR_DTYPE)
        indices = np.ascontiguousarray(indices, dtype=INDEX_DTYPE)
        if distances.shape != (self.k,) or indices.shape != (self.k,):
            raise ValueError(
                f"Expected records of width {self.k}, got {distances.shape} and {indices.shape}"
            )
        self._distances.write(distances.tobytes())
        self._indices.write(indices.tobytes())
        self.records += 1

    def close(self) -> None:
        for f in (self._distances, self._indices):
            if f is not None:
                f.close()
        self._distances = None
        self._indices = None

    def __enter__(self) -> "NeighborWriter":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()


def read_neighbors(
    distance_path: str | os.PathLike,
    index_path: str | os.PathLike,
    k: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Load the output of a k-NN run.

    Args:
        distance_path: Distance file written by NeighborWriter.
        index_path: Index file written by NeighborWriter.
        k: Record width (the run's effective k).

    Returns:
        distances: float64 array of shape (n_fit, k).
        indices: intc array of shape (n_fit, k).
    """
    distances = _read_array(distance_path, VECTOR_DTYPE)
    indices = _read_array(index_path, INDEX_DTYPE)

    if k <= 0:
        if distances.size or indices.size:
            raise DataFormatError("Neighbor files are not empty but k is 0")
        return distances.reshape(0, 0), indices.reshape(0, 0)

    if distances.size % k or indices.size % k:
        raise DataFormatError(f"Neighbor files do not hold whole records of width {k}")
    if distances.size != indices.size:
        raise DataFormatError(
            f"Distance file has {distances.size // k} records but index file has {indices.size // k}"
        )
    return distances.reshape(-1, k), indices.reshape(-1, k)


def _read_array(path: str | os.PathLike, dtype: np.dtype) -> np.ndarray:
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise DataFormatError(f"Cannot read neighbor file '{path}': {e.strerror or e}") from e
    if len(raw) % dtype.itemsize:
        raise DataFormatError(f"'{path}' is not a whole number of {dtype.name} values")
    return np.frombuffer(raw, dtype=dtype)
