"""Run metrics: throughput and memory usage."""

import psutil


def frames_per_second(n_frames: int, elapsed_seconds: float) -> float:
    """Compute fitting frames processed per second.

    Args:
        n_frames: Number of fitting vectors processed.
        elapsed_seconds: Wall-clock time in seconds.

    Returns:
        Frames per second; inf when no time elapsed.
    """
    if elapsed_seconds <= 0:
        return float("inf")
    return n_frames / elapsed_seconds


def memory_usage_bytes() -> int:
    """Return current process RSS memory in bytes."""
    return psutil.Process().memory_info().rss
