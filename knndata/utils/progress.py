"""Progress bar with an expected-finish-time postfix."""

import time

from tqdm import tqdm


def eta_string(elapsed: float, done: int, total: int, now: float | None = None) -> str:
    """Expected wall-clock finish time.

    Args:
        elapsed: Seconds since the loop started.
        done: Frames processed so far.
        total: Total number of frames.
        now: Current epoch time. Defaults to time.time().

    Returns:
        ctime-style string cut to 20 characters (e.g. "Mon Oct 19 15:01:02 "),
        or "unknown" before the first frame is done.
    """
    if done <= 0 or total <= 0:
        return "unknown"
    now = time.time() if now is None else now
    start = now - elapsed
    eta = start + elapsed * total / done
    return time.ctime(eta)[:20]


class ProgressReporter:
    """Wraps a tqdm bar over the fitting frames.

    The postfix is refreshed at most once every ``interval`` seconds.
    """

    def __init__(self, total: int, enabled: bool = True, interval: float = 1.0, desc: str = "Frame"):
        self.total = total
        self.interval = interval
        self.done = 0
        self.eta = None
        self._start = time.perf_counter()
        self._last = self._start
        self._bar = tqdm(
            total=total,
            desc=desc,
            unit="frame",
            mininterval=interval,
            disable=not enabled,
            leave=True,
        )

    def update(self, done: int) -> None:
        """Record that ``done`` frames are finished."""
        self._bar.update(done - self.done)
        self.done = done
        now = time.perf_counter()
        if now - self._last >= self.interval:
            self._last = now
            self.eta = eta_string(now - self._start, done, self.total)
            self._bar.set_postfix_str(f"will finish {self.eta}", refresh=False)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> "ProgressReporter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
