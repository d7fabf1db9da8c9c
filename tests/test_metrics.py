"""Tests for license_remover/observability/metrics.py."""

from license_remover.observability import RunMetrics


class TestRunMetrics:
    """Tests for RunMetrics."""

    def test_counts(self):
        metrics = RunMetrics.start(total=5)
        metrics.record_success()
        metrics.record_success()
        metrics.record_failure("NetworkError")
        metrics.record_failure("NetworkError")
        metrics.record_failure("UnknownStatus")
        metrics.record_throttle(600)

        assert metrics.removed == 2
        assert metrics.transient_failures == 3
        assert metrics.throttle_hits == 1
        assert metrics.attempts == 6
        assert metrics.cooldown_seconds == 600
        assert metrics.errors_by_type == {"NetworkError": 2, "UnknownStatus": 1}

    def test_success_rate(self):
        metrics = RunMetrics.start(total=2)
        assert metrics.success_rate == 0.0

        metrics.record_success()
        metrics.record_failure()

        assert metrics.success_rate == 50.0

    def test_complete_freezes_duration(self):
        metrics = RunMetrics.start(total=0)
        metrics.complete()

        assert metrics.ended_at is not None
        assert metrics.duration_seconds == metrics.duration_seconds

    def test_to_dict(self):
        metrics = RunMetrics.start(total=3)
        metrics.record_success()
        metrics.complete()

        d = metrics.to_dict()

        assert d["total"] == 3
        assert d["removed"] == 1
        assert d["success_rate"] == 100.0
        assert d["ended_at"] is not None

    def test_summary(self):
        metrics = RunMetrics.start(total=3)
        metrics.record_success()
        metrics.record_failure("PayloadError")
        metrics.record_throttle(600)
        metrics.complete()

        summary = metrics.to_summary()

        assert "Removal Summary" in summary
        assert "Removed: 1/3 licenses" in summary
        assert "Throttled: 1 times (10 min cooling down)" in summary
        assert "PayloadError: 1" in summary

    def test_summary_without_throttles(self):
        summary = RunMetrics.start(total=1).to_summary()

        assert "Throttled" not in summary
        assert "Errors by Type" not in summary
