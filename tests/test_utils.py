"""Tests for utility modules: timer and progress reporting."""

import time

from knndata.utils.progress import ProgressReporter, eta_string
from knndata.utils.timer import timer


class TestTimer:
    def test_measures_time(self):
        with timer() as t:
            _ = sum(range(10000))
        assert t.elapsed > 0
        assert t.elapsed < 5.0  # sanity


class TestEtaString:
    def test_unknown_before_first_frame(self):
        assert eta_string(10.0, 0, 100) == "unknown"

    def test_linear_projection(self):
        # Started at 990, half done after 10s -> finishes at 1010
        assert eta_string(10.0, 5, 10, now=1000.0) == time.ctime(1010.0)[:20]

    def test_length(self):
        assert len(eta_string(3.0, 1, 7)) == 20


class TestProgressReporter:
    def test_disabled_counts_frames(self):
        with ProgressReporter(total=3, enabled=False) as reporter:
            for done in range(1, 4):
                reporter.update(done)
        assert reporter.done == 3

    def test_postfix_rate_limited(self):
        reporter = ProgressReporter(total=5, enabled=False, interval=3600.0)
        reporter.update(1)
        assert reporter.eta is None
        reporter.close()

    def test_postfix_set(self):
        reporter = ProgressReporter(total=5, enabled=False, interval=0.0)
        reporter.update(2)
        assert reporter.eta is not None
        assert reporter.eta != "unknown"
        reporter.close()
