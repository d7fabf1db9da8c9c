"""Metrics collection for removal runs.

Tracks removal statistics like transient failures, throttle hits and time
spent cooling down.

Usage:
    from license_remover.observability import RunMetrics

    metrics = RunMetrics.start(total=250)
    metrics.record_success()
    metrics.record_failure(error_type="NetworkError")
    metrics.complete()

    print(metrics.to_summary())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class RunMetrics:
    """Metrics for a single removal run."""

    started_at: datetime
    ended_at: datetime | None = None

    # Counts
    total: int = 0
    removed: int = 0
    transient_failures: int = 0
    throttle_hits: int = 0

    cooldown_seconds: float = 0.0

    # Error breakdown by type
    errors_by_type: dict[str, int] = field(default_factory=dict)

    @classmethod
    def start(cls, total: int) -> RunMetrics:
        return cls(started_at=datetime.now(), total=total)

    @property
    def duration_seconds(self) -> float:
        """Total duration in seconds."""
        if self.ended_at is None:
            return (datetime.now() - self.started_at).total_seconds()
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def attempts(self) -> int:
        """Requests issued so far."""
        return self.removed + self.transient_failures + self.throttle_hits

    @property
    def success_rate(self) -> float:
        """Share of requests that removed a license, as percentage (0-100)."""
        if self.attempts == 0:
            return 0.0
        return self.removed / self.attempts * 100

    def record_success(self) -> None:
        self.removed += 1

    def record_failure(self, error_type: str = "unknown") -> None:
        """Record a transient failure with its error type."""
        self.transient_failures += 1
        self.errors_by_type[error_type] = self.errors_by_type.get(error_type, 0) + 1

    def record_throttle(self, cooldown_seconds: float) -> None:
        self.throttle_hits += 1
        self.cooldown_seconds += cooldown_seconds

    def complete(self) -> None:
        """Mark the run as complete."""
        self.ended_at = datetime.now()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_seconds": round(self.duration_seconds, 2),
            "total": self.total,
            "removed": self.removed,
            "transient_failures": self.transient_failures,
            "throttle_hits": self.throttle_hits,
            "cooldown_seconds": round(self.cooldown_seconds, 1),
            "success_rate": round(self.success_rate, 2),
            "errors_by_type": self.errors_by_type,
        }

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Removal Summary",
            "=" * 40,
            f"Duration: {self.duration_seconds:.1f}s",
            f"Removed: {self.removed}/{self.total} licenses",
            f"Requests: {self.attempts} ({self.success_rate:.1f}% successful)",
            f"Transient failures: {self.transient_failures}",
        ]

        if self.throttle_hits > 0:
            lines.append(
                f"Throttled: {self.throttle_hits} times "
                f"({self.cooldown_seconds / 60:.0f} min cooling down)"
            )

        if self.errors_by_type:
            lines.append("")
            lines.append("Errors by Type:")
            for error_type, count in sorted(self.errors_by_type.items(), key=lambda x: -x[1]):
                lines.append(f"  {error_type}: {count}")

        return "\n".join(lines)
