"""Timed lockout after the endpoint signals throttling.

State transitions:
INACTIVE → [activate(duration)] → ACTIVE(end)
ACTIVE → [clock >= end] → INACTIVE, resume callback fires once
ACTIVE → [activate(duration)] → ACTIVE(new end), earlier timers cancelled

Waiting and status reporting are separate tasks: one wake-up scheduled for the
known expiry, and an optional periodic tick that reports remaining time.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..config.constants import DEFAULT_COOLDOWN_TICK
from ..observability.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CooldownController:
    """Cooldown timer with last-write-wins reactivation.

    Usage:
        cooldown = CooldownController(tick_interval=15, on_tick=report)

        cooldown.activate(600, on_resume=resume)
        await cooldown.wait()
    """

    # Configuration
    tick_interval: float = DEFAULT_COOLDOWN_TICK
    on_tick: Callable[[float], None] | None = None
    clock: Callable[[], float] = time.monotonic

    # State
    _end: float | None = field(default=None, init=False)
    _generation: int = field(default=0, init=False)
    _wake_task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _tick_task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _inactive: asyncio.Event = field(default_factory=asyncio.Event, init=False, repr=False)

    def __post_init__(self) -> None:
        self._inactive.set()

    @property
    def is_active(self) -> bool:
        """Check if a cooldown is in progress."""
        return self._end is not None

    @property
    def end_time(self) -> float | None:
        """Clock value at which the current cooldown expires."""
        return self._end

    def remaining(self) -> float:
        """Seconds until the cooldown expires (0 when inactive)."""
        if self._end is None:
            return 0.0
        return max(0.0, self._end - self.clock())

    def activate(
        self,
        duration: float,
        on_resume: Callable[[], None] | None = None,
    ) -> None:
        """Start (or restart) a cooldown of `duration` seconds.

        Must be called from a running event loop. Any timers installed by an
        earlier activation are cancelled first; only this activation's
        `on_resume` can fire.
        """
        self._cancel_timers()
        self._generation += 1
        generation = self._generation

        self._end = self.clock() + duration
        self._inactive.clear()

        self._wake_task = asyncio.create_task(self._wake_at_expiry(generation, on_resume))
        if self.on_tick is not None and self.tick_interval > 0:
            self._tick_task = asyncio.create_task(self._tick(generation))

        logger.debug(
            "Cooldown activated",
            extra={"duration_seconds": duration, "generation": generation},
        )

    async def wait(self) -> None:
        """Block until no cooldown is active."""
        await self._inactive.wait()

    def release(self) -> None:
        """Drop any pending cooldown without resuming (teardown)."""
        self._cancel_timers()
        self._generation += 1
        self._end = None
        self._inactive.set()

    async def _wake_at_expiry(
        self,
        generation: int,
        on_resume: Callable[[], None] | None,
    ) -> None:
        # asyncio.sleep may return marginally early; only expire once the
        # clock has actually reached the end time
        while (remaining := self.remaining()) > 0:
            await asyncio.sleep(remaining)

        if generation != self._generation:
            return

        self._end = None
        self._wake_task = None
        self._cancel_tick()
        self._inactive.set()

        logger.debug("Cooldown expired", extra={"generation": generation})
        if on_resume is not None:
            on_resume()

    async def _tick(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            if generation != self._generation or not self.is_active:
                return
            remaining = self.remaining()
            if remaining <= 0:
                return
            if self.on_tick is not None:
                self.on_tick(remaining)

    def _cancel_tick(self) -> None:
        if self._tick_task is not None and self._tick_task is not asyncio.current_task():
            self._tick_task.cancel()
        self._tick_task = None

    def _cancel_timers(self) -> None:
        if self._wake_task is not None and self._wake_task is not asyncio.current_task():
            self._wake_task.cancel()
        self._wake_task = None
        self._cancel_tick()
