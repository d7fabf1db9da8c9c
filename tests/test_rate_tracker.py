"""Tests for license_remover/rate_limit/tracker.py.

Pure arithmetic over timestamps - no clock, no mocking.
"""

import pytest

from license_remover.rate_limit import RateTracker

START = 1_000_000.0
MINUTE = 60.0


class TestCurrentRate:
    """Tests for RateTracker.current_rate()."""

    def test_no_completions(self):
        """Nothing removed yet gives zero rates."""
        tracker = RateTracker(started_at=START)

        rate = tracker.current_rate(START + 10 * MINUTE)

        assert rate.recent == 0
        assert rate.overall == 0.0

    def test_old_completions_leave_the_window(self):
        """Completions at +10m, +20m, +50m viewed at +95m.

        Only +50m is strictly less than an hour old; overall is
        3 / (95/60) = 1.89 -> 1.9.
        """
        tracker = RateTracker(started_at=START)
        for minutes in (10, 20, 50):
            tracker.record_completion(START + minutes * MINUTE)

        rate = tracker.current_rate(START + 95 * MINUTE)

        assert rate.recent == 1
        assert rate.overall == 1.9

    def test_completions_at_start_half_hour_and_ninety_minutes(self):
        """Completions at t, t+30m, t+90m viewed at t+95m.

        t and t+30m are 95 and 65 minutes old, so only t+90m is recent.
        """
        tracker = RateTracker(started_at=START)
        for minutes in (0, 30, 90):
            tracker.record_completion(START + minutes * MINUTE)

        rate = tracker.current_rate(START + 95 * MINUTE)

        assert rate.recent == 1
        assert rate.overall == 1.9

    def test_two_completions_in_window(self):
        """Completions at +40m and +50m both count at +95m."""
        tracker = RateTracker(started_at=START)
        for minutes in (10, 40, 50):
            tracker.record_completion(START + minutes * MINUTE)

        rate = tracker.current_rate(START + 95 * MINUTE)

        assert rate.recent == 2
        assert rate.overall == 1.9

    def test_exactly_one_hour_old_is_excluded(self):
        """The window is strict: now - ts must be below one hour."""
        tracker = RateTracker(started_at=START)
        tracker.record_completion(START)

        rate = tracker.current_rate(START + 60 * MINUTE)

        assert rate.recent == 0
        assert rate.overall == 1.0

    def test_pruning_is_permanent(self):
        """History entries outside the window are dropped."""
        tracker = RateTracker(started_at=START)
        tracker.record_completion(START + MINUTE)
        tracker.record_completion(START + 70 * MINUTE)

        tracker.current_rate(START + 100 * MINUTE)

        assert len(tracker) == 1
        assert tracker.total == 2

    def test_zero_elapsed_time(self):
        """No elapsed time falls back to the recent count."""
        tracker = RateTracker(started_at=START)
        tracker.record_completion(START)

        rate = tracker.current_rate(START)

        assert rate.recent == 1
        assert rate.overall == 1.0

    def test_overall_rate_rounding(self):
        """Overall rate is rounded to one decimal."""
        tracker = RateTracker(started_at=START)
        for i in range(7):
            tracker.record_completion(START + i * MINUTE)

        rate = tracker.current_rate(START + 3 * 60 * MINUTE)

        # 7 / 3 = 2.333...
        assert rate.overall == pytest.approx(2.3)

    def test_custom_window(self):
        tracker = RateTracker(started_at=START, window=5 * MINUTE)
        tracker.record_completion(START + MINUTE)
        tracker.record_completion(START + 8 * MINUTE)

        rate = tracker.current_rate(START + 10 * MINUTE)

        assert rate.recent == 1
