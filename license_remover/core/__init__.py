"""Core infrastructure for license removal."""

from .errors import (
    ConfigurationError,
    DiscoveryError,
    HTTPStatusError,
    NetworkError,
    PayloadError,
    RemoverError,
    TransportError,
    classify_exception,
)
from .types import (
    Credential,
    EventKind,
    LoopState,
    Outcome,
    ProgressEvent,
    ProgressSnapshot,
    RateStats,
    RemovalResponse,
    RunResult,
)

__all__ = [
    # Errors
    "RemoverError",
    "TransportError",
    "HTTPStatusError",
    "NetworkError",
    "PayloadError",
    "DiscoveryError",
    "ConfigurationError",
    "classify_exception",
    # Types
    "Credential",
    "EventKind",
    "LoopState",
    "Outcome",
    "ProgressEvent",
    "ProgressSnapshot",
    "RateStats",
    "RemovalResponse",
    "RunResult",
]
