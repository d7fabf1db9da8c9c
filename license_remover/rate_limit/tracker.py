"""Removal throughput tracking."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config.constants import HOUR_SECONDS
from ..core.types import RateStats


@dataclass
class RateTracker:
    """Sliding-window and overall removal rate.

    Timestamps are seconds on any monotonic scale shared with `started_at`.
    History older than `window` is pruned lazily in `current_rate`.
    """

    started_at: float
    window: float = HOUR_SECONDS

    _history: list[float] = field(default_factory=list, init=False, repr=False)
    _total: int = field(default=0, init=False)

    @property
    def total(self) -> int:
        """Completions recorded since the run started."""
        return self._total

    def record_completion(self, timestamp: float) -> None:
        self._history.append(timestamp)
        self._total += 1

    def current_rate(self, now: float) -> RateStats:
        """Compute recent and overall removals per hour.

        `recent` counts completions strictly within the trailing window.
        `overall` is total completions over elapsed hours, rounded to one
        decimal; with no elapsed time it falls back to the recent count.
        """
        self._history = [ts for ts in self._history if now - ts < self.window]
        recent = len(self._history)

        elapsed = now - self.started_at
        if elapsed <= 0:
            return RateStats(recent=recent, overall=float(recent))

        overall = self._total / (elapsed / HOUR_SECONDS)
        return RateStats(recent=recent, overall=round(overall, 1))

    def __len__(self) -> int:
        """Number of retained history entries."""
        return len(self._history)
