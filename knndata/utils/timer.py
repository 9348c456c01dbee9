"""Timing context manager for the load and search phases."""

import time
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass
class TimingResult:
    """Stores elapsed time from a timing context."""

    elapsed: float = 0.0


@contextmanager
def timer():
    """Context manager that measures wall-clock time in seconds.

    Usage:
        with timer() as t:
            reference = load_vectors(path, dim)
        print(f"Loaded in {t.elapsed:.3f}s")
    """
    result = TimingResult()
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start
