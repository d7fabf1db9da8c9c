"""Backoff policies for retrying transient removal failures.

Failed identifiers are always requeued, so a policy only decides how long to
wait before the next attempt. There is no attempt cap.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..config.constants import DEFAULT_MAX_RETRY_DELAY, DEFAULT_REQUEST_DELAY


class BackoffPolicy(ABC):
    """Abstract base for backoff policies."""

    @abstractmethod
    def next_delay(self, attempt: int) -> float:
        """Calculate delay before the next attempt.

        Args:
            attempt: Consecutive transient failures so far (0-indexed)

        Returns:
            Delay in seconds before the next attempt
        """
        ...


@dataclass
class FixedBackoff(BackoffPolicy):
    """Same delay after every failure."""

    delay: float = DEFAULT_REQUEST_DELAY

    def next_delay(self, attempt: int) -> float:
        return self.delay


@dataclass
class ExponentialBackoff(BackoffPolicy):
    """Exponential backoff with optional jitter.

    delay = min(base * (multiplier ^ attempt), max_delay) + jitter

    Example with defaults:
        attempt 0: 2s + jitter
        attempt 1: 4s + jitter
        attempt 2: 8s + jitter
        ...
        attempt 6: 120s + jitter (capped at max)
    """

    base: float = DEFAULT_REQUEST_DELAY
    multiplier: float = 2.0
    max_delay: float = DEFAULT_MAX_RETRY_DELAY
    jitter: float = 1.0  # Random jitter range (0 to this value)

    def next_delay(self, attempt: int) -> float:
        delay = min(self.base * (self.multiplier**attempt), self.max_delay)
        if self.jitter > 0:
            delay += random.uniform(0, self.jitter)
        return delay


def build_backoff(kind: str, base: float, max_delay: float) -> BackoffPolicy:
    """Build the retry policy named in settings ("fixed" or "exponential")."""
    if kind == "exponential":
        return ExponentialBackoff(base=base, max_delay=max_delay)
    if kind == "fixed":
        return FixedBackoff(delay=base)
    raise ValueError(f"Unknown backoff policy: {kind}")
