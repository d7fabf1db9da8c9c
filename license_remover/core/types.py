"""Shared types for license removal."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    """Classification of one removal attempt."""

    SUCCESS = "success"  # License removed - identifier is done
    THROTTLED = "throttled"  # Endpoint locked us out - requeue and cool down
    TRANSIENT = "transient"  # Anything else - requeue and retry


class LoopState(str, Enum):
    """Processing loop states."""

    IDLE = "idle"
    DISPATCHING = "dispatching"
    COOLDOWN = "cooldown"
    DRAINED = "drained"


class EventKind(str, Enum):
    """Kinds of progress events emitted by the processing loop."""

    STARTED = "started"
    SUCCESS = "success"
    COOLDOWN_START = "cooldown_start"
    COOLDOWN_TICK = "cooldown_tick"
    COOLDOWN_END = "cooldown_end"
    RETRY = "retry"
    DRAINED = "drained"


@dataclass(frozen=True)
class Credential:
    """Session credential for the removal endpoint.

    Opaque to the processing loop; only the transport reads it.
    """

    session_id: str
    login_cookie: str | None = None

    def __repr__(self) -> str:
        return "Credential(session_id=***, login_cookie=***)"


@dataclass(frozen=True)
class RemovalResponse:
    """Parsed response of one removal request."""

    identifier: str
    status_code: int
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RateStats:
    """Removal throughput in removals per hour."""

    recent: int  # Completions within the trailing hour
    overall: float  # Completions per hour since the run started


@dataclass(frozen=True)
class ProgressSnapshot:
    """Read-only view of run progress, rebuilt after each success."""

    removed: int
    total: int
    remaining: int
    recent_rate: int
    overall_rate: float
    eta: datetime | None = None

    @property
    def progress_percent(self) -> float:
        """Progress percentage."""
        if self.total == 0:
            return 100.0
        return self.removed / self.total * 100


@dataclass(frozen=True)
class ProgressEvent:
    """Structured event emitted after a loop transition.

    Only the fields relevant to `kind` are set.
    """

    kind: EventKind
    identifier: str | None = None
    status_code: int | None = None
    snapshot: ProgressSnapshot | None = None
    remaining_seconds: float | None = None
    error: str | None = None
    total: int | None = None
    summary: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a dict for structured logging, excluding None values."""
        data: dict[str, Any] = {
            "event": self.kind.value,
            "identifier": self.identifier,
            "status_code": self.status_code,
            "remaining_seconds": self.remaining_seconds,
            "error": self.error,
            "total": self.total,
        }
        if self.snapshot is not None:
            data.update(
                removed=self.snapshot.removed,
                total=self.snapshot.total,
                queued=self.snapshot.remaining,
                recent_rate=self.snapshot.recent_rate,
                overall_rate=self.snapshot.overall_rate,
                eta=self.snapshot.eta.isoformat() if self.snapshot.eta else None,
            )
        if self.summary is not None:
            data["summary"] = self.summary
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class RunResult:
    """Result of a complete processing run."""

    total: int
    removed: list[str] = field(default_factory=list)
    transient_failures: int = 0
    throttle_hits: int = 0

    @property
    def removed_count(self) -> int:
        return len(self.removed)

    @property
    def drained(self) -> bool:
        """Whether every discovered identifier was removed."""
        return self.removed_count == self.total
