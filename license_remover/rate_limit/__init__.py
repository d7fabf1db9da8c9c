"""Rate limit handling: throughput tracking, cooldowns and retry pacing."""

from .backoff import BackoffPolicy, ExponentialBackoff, FixedBackoff, build_backoff
from .cooldown import CooldownController
from .tracker import RateTracker

__all__ = [
    # Backoff policies
    "BackoffPolicy",
    "ExponentialBackoff",
    "FixedBackoff",
    "build_backoff",
    # Cooldown
    "CooldownController",
    # Throughput
    "RateTracker",
]
