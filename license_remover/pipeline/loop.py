"""Sequential removal driver.

State transitions:
IDLE → [queue non-empty, no cooldown] → DISPATCHING
DISPATCHING → [success code] → IDLE, next attempt after request_delay
DISPATCHING → [throttle code] → requeue → COOLDOWN → IDLE, one resumed dispatch
DISPATCHING → [anything else] → requeue → IDLE, next attempt after backoff delay
IDLE → [queue empty] → DRAINED (terminal)

At most one identifier is in flight. Failed identifiers are pushed back
onto the queue, never dropped, so persistent failures are retried forever.
"""

from __future__ import annotations

import asyncio
import math
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime

from ..config.constants import (
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_REQUEST_DELAY,
    SUCCESS_CODES,
    THROTTLE_CODE,
)
from ..config.settings import Settings
from ..core.errors import RemoverError, classify_exception
from ..core.types import (
    Credential,
    LoopState,
    Outcome,
    ProgressSnapshot,
    RemovalResponse,
    RunResult,
)
from ..observability.logger import get_logger, log_context
from ..observability.metrics import RunMetrics
from ..rate_limit.backoff import BackoffPolicy, FixedBackoff, build_backoff
from ..rate_limit.cooldown import CooldownController
from ..rate_limit.tracker import RateTracker
from ..sources.base import RemovalTransport
from .queue import ItemQueue
from .reporter import ProgressReporter

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class LoopPolicy:
    """Response codes and pacing constants for the processing loop."""

    request_delay: float = DEFAULT_REQUEST_DELAY
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    throttle_code: int = THROTTLE_CODE
    success_codes: frozenset[int] = field(default_factory=lambda: frozenset(SUCCESS_CODES))

    @classmethod
    def from_settings(cls, settings: Settings) -> LoopPolicy:
        return cls(
            request_delay=settings.request_delay,
            cooldown_seconds=settings.cooldown_seconds,
            throttle_code=settings.throttle_code,
            success_codes=frozenset(settings.success_codes),
        )


class ProcessingLoop:
    """Drains an ItemQueue one removal request at a time.

    Usage:
        loop = ProcessingLoop(ItemQueue(ids), client, credential)
        result = await loop.run()

    `process_next()` performs a single guarded step and can be driven
    directly; `run()` repeats it, honoring delays and cooldowns, until the
    queue is drained.
    """

    def __init__(
        self,
        queue: ItemQueue,
        transport: RemovalTransport,
        credential: Credential,
        *,
        policy: LoopPolicy | None = None,
        reporter: ProgressReporter | None = None,
        cooldown: CooldownController | None = None,
        backoff: BackoffPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the processing loop.

        Args:
            queue: Identifiers to remove; its size at this point is the run total
            transport: Issues removal requests
            credential: Passed through to the transport untouched
            policy: Response codes and delays (defaults match the store endpoint)
            reporter: Progress event sink
            cooldown: Cooldown timer; its tick reports through `reporter` unless
                it already has a tick callback
            backoff: Delay policy after transient failures (fixed request_delay
                if None)
            sleep: Awaitable used for inter-attempt delays
            clock: Wall-clock seconds, used for rates and ETA
        """
        self.queue = queue
        self.total = len(queue)
        self.policy = policy or LoopPolicy()
        self.reporter = reporter or ProgressReporter()
        self.cooldown = cooldown or CooldownController()
        if self.cooldown.on_tick is None:
            self.cooldown.on_tick = self.reporter.cooldown_tick
        self.backoff = backoff or FixedBackoff(self.policy.request_delay)

        self._transport = transport
        self._credential = credential
        self._sleep = sleep
        self._clock = clock

        self.removed: list[str] = []
        self.rates = RateTracker(started_at=clock())
        self.metrics = RunMetrics.start(self.total)

        self._in_flight: str | None = None
        self._drained = False
        self._consecutive_failures = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        queue: ItemQueue,
        transport: RemovalTransport,
        credential: Credential,
        reporter: ProgressReporter | None = None,
    ) -> ProcessingLoop:
        """Build a loop with pacing, cooldown and backoff taken from settings."""
        return cls(
            queue,
            transport,
            credential,
            policy=LoopPolicy.from_settings(settings),
            reporter=reporter,
            cooldown=CooldownController(tick_interval=settings.cooldown_tick_interval),
            backoff=build_backoff(
                settings.retry_backoff,
                base=settings.request_delay,
                max_delay=settings.max_retry_delay,
            ),
        )

    @property
    def state(self) -> LoopState:
        """Current processing state."""
        if self._drained:
            return LoopState.DRAINED
        if self._in_flight is not None:
            return LoopState.DISPATCHING
        if self.cooldown.is_active:
            return LoopState.COOLDOWN
        return LoopState.IDLE

    @property
    def in_flight(self) -> str | None:
        """Identifier whose request is outstanding, if any."""
        return self._in_flight

    async def run(self) -> RunResult:
        """Process the queue until it is drained."""
        # Counters from earlier process_next() calls carry over
        if self.metrics.attempts == 0:
            self.rates = RateTracker(started_at=self._clock())
            self.metrics = RunMetrics.start(self.total)

        with log_context(run_id=uuid.uuid4().hex[:8], phase="remove"):
            self.reporter.started(self.total)
            try:
                while not self._drained:
                    if self.cooldown.is_active:
                        await self.cooldown.wait()
                        continue

                    outcome = await self.process_next()

                    if outcome is None:
                        if not self._drained and not self.cooldown.is_active:
                            # Another caller holds the in-flight slot
                            await self._sleep(self.policy.request_delay)
                        continue

                    if outcome is Outcome.THROTTLED:
                        continue

                    if self.queue:
                        await self._sleep(self._delay_after(outcome))
            finally:
                self.cooldown.release()

        return self.result()

    async def process_next(self) -> Outcome | None:
        """Dispatch one identifier and apply the outcome.

        Returns:
            The attempt's outcome, or None if nothing was dispatched (already
            in flight, cooling down, or drained)
        """
        if self._in_flight is not None:
            logger.warning("Already processing an item, skipping this call")
            return None

        if self.cooldown.is_active:
            logger.warning("In cooldown period, skipping this call")
            return None

        if self._drained:
            return None

        identifier = self.queue.pop()
        if identifier is None:
            self._finish()
            return None

        self._in_flight = identifier
        try:
            with log_context(identifier=identifier):
                response = await self._transport.submit_removal(identifier, self._credential)
        except asyncio.CancelledError:
            self._in_flight = None
            self.queue.push_back(identifier)
            raise
        except Exception as e:
            self._in_flight = None
            return self._on_failure(identifier, classify_exception(e, identifier))

        self._in_flight = None
        return self._on_response(identifier, response)

    def snapshot(self, now: float | None = None) -> ProgressSnapshot:
        """Build a progress snapshot from the current counters."""
        if now is None:
            now = self._clock()

        rate = self.rates.current_rate(now)
        removed = len(self.removed)
        remaining = len(self.queue)

        eta: datetime | None = None
        if removed:
            elapsed = now - self.rates.started_at
            eta_seconds = math.floor(elapsed / removed * remaining) if remaining else 0
            eta = datetime.fromtimestamp(now + eta_seconds)

        return ProgressSnapshot(
            removed=removed,
            total=self.total,
            remaining=remaining,
            recent_rate=rate.recent,
            overall_rate=rate.overall,
            eta=eta,
        )

    def result(self) -> RunResult:
        return RunResult(
            total=self.total,
            removed=list(self.removed),
            transient_failures=self.metrics.transient_failures,
            throttle_hits=self.metrics.throttle_hits,
        )

    # ==================== Outcome handling ====================

    def _on_response(self, identifier: str, response: RemovalResponse) -> Outcome:
        code = response.status_code

        if code == self.policy.throttle_code:
            self.queue.push_back(identifier)
            seconds = self.policy.cooldown_seconds
            self.metrics.record_throttle(seconds)
            self.reporter.cooldown_start(identifier, seconds)
            self.cooldown.activate(seconds, on_resume=self.reporter.cooldown_end)
            return Outcome.THROTTLED

        if code in self.policy.success_codes:
            now = self._clock()
            self.removed.append(identifier)
            self._consecutive_failures = 0
            self.rates.record_completion(now)
            self.metrics.record_success()
            self.reporter.success(identifier, code, self.snapshot(now))
            return Outcome.SUCCESS

        self.queue.push_back(identifier)
        self._consecutive_failures += 1
        self.metrics.record_failure(error_type="UnknownStatus")
        self.reporter.retry(identifier, f"unknown response code {code}", status_code=code)
        return Outcome.TRANSIENT

    def _on_failure(self, identifier: str, error: RemoverError) -> Outcome:
        self.queue.push_back(identifier)
        self._consecutive_failures += 1
        self.metrics.record_failure(error_type=type(error).__name__)
        logger.debug("Removal request failed", extra={"error": error.to_dict()})
        self.reporter.retry(identifier, str(error))
        return Outcome.TRANSIENT

    def _delay_after(self, outcome: Outcome) -> float:
        if outcome is Outcome.TRANSIENT:
            return self.backoff.next_delay(self._consecutive_failures - 1)
        return self.policy.request_delay

    def _finish(self) -> None:
        self._drained = True
        self.metrics.complete()
        self.cooldown.release()
        self.reporter.drained(self.total, summary=self.metrics.to_dict())
