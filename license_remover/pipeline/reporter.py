"""Progress event formatting and emission."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

from ..core.types import EventKind, ProgressEvent, ProgressSnapshot
from ..observability.logger import get_logger

logger = get_logger(__name__)

EventSink = Callable[[ProgressEvent], None]

_LEVELS = {
    EventKind.COOLDOWN_START: logging.WARNING,
    EventKind.RETRY: logging.WARNING,
}


def format_countdown(seconds: float) -> str:
    """Format remaining seconds as m:ss, rounding up to the next second."""
    total = max(0, math.ceil(seconds))
    return f"{total // 60}:{total % 60:02d}"


class ProgressReporter:
    """Turns loop transitions into one log line each.

    Every event goes to the `license_remover.progress` logger with its fields
    attached as structured extras, then to any registered sinks. Emission
    never raises into the caller: a failing sink is logged and skipped.
    """

    def __init__(
        self,
        sinks: Iterable[EventSink] = (),
        event_logger: logging.Logger | None = None,
    ) -> None:
        self._sinks: list[EventSink] = list(sinks)
        self._logger = event_logger or get_logger("license_remover.progress")

    def add_sink(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: ProgressEvent) -> str:
        """Format and publish an event. Returns the formatted line."""
        line = self.format(event)
        self._logger.log(_LEVELS.get(event.kind, logging.INFO), line, extra=event.to_dict())

        for sink in self._sinks:
            try:
                sink(event)
            except Exception:
                logger.exception("Progress sink failed", extra={"sink": repr(sink)})

        return line

    @staticmethod
    def format(event: ProgressEvent) -> str:
        """Render an event as a human-readable line."""
        kind = event.kind

        if kind is EventKind.STARTED:
            return f"Starting removal of {event.total} entries"

        if kind is EventKind.SUCCESS:
            snap = event.snapshot
            if snap is None:
                return f"Removed license {event.identifier}"
            eta = snap.eta.strftime("%H:%M:%S") if snap.eta else "-"
            return (
                f"Removed {snap.removed} of {snap.total} licenses "
                f"(success code: {event.status_code}). "
                f"Rate: {snap.recent_rate}/hour (last hour), "
                f"{snap.overall_rate}/hour (overall). "
                f"ETA: {eta}"
            )

        if kind is EventKind.COOLDOWN_START:
            wait = format_countdown(event.remaining_seconds or 0.0)
            return (
                f"Cooldown detected on license {event.identifier}! "
                f"Waiting {wait} minutes before continuing..."
            )

        if kind is EventKind.COOLDOWN_TICK:
            return f"Cooldown: {format_countdown(event.remaining_seconds or 0.0)} minutes remaining"

        if kind is EventKind.COOLDOWN_END:
            return "Cooldown period finished, resuming license removal..."

        if kind is EventKind.RETRY:
            if event.status_code is not None:
                return (
                    f"Unknown response code {event.status_code} for license "
                    f"{event.identifier}, retrying later"
                )
            return f"Failed to remove license {event.identifier}: {event.error}, retrying later"

        if kind is EventKind.DRAINED:
            return f"All {event.total} licenses removed!"

        return kind.value

    # ==================== Event builders ====================

    def started(self, total: int) -> str:
        return self.emit(ProgressEvent(EventKind.STARTED, total=total))

    def success(self, identifier: str, status_code: int, snapshot: ProgressSnapshot) -> str:
        return self.emit(
            ProgressEvent(
                EventKind.SUCCESS,
                identifier=identifier,
                status_code=status_code,
                snapshot=snapshot,
            )
        )

    def cooldown_start(self, identifier: str, seconds: float) -> str:
        return self.emit(
            ProgressEvent(
                EventKind.COOLDOWN_START,
                identifier=identifier,
                remaining_seconds=seconds,
            )
        )

    def cooldown_tick(self, remaining: float) -> str:
        return self.emit(ProgressEvent(EventKind.COOLDOWN_TICK, remaining_seconds=remaining))

    def cooldown_end(self) -> str:
        return self.emit(ProgressEvent(EventKind.COOLDOWN_END))

    def retry(
        self,
        identifier: str,
        error: str,
        status_code: int | None = None,
    ) -> str:
        return self.emit(
            ProgressEvent(
                EventKind.RETRY,
                identifier=identifier,
                error=error,
                status_code=status_code,
            )
        )

    def drained(self, total: int, summary: dict[str, Any] | None = None) -> str:
        return self.emit(ProgressEvent(EventKind.DRAINED, total=total, summary=summary))
