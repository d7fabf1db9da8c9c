"""Test doubles for the processing loop's collaborators."""

import asyncio
from collections.abc import Callable

from license_remover.core.types import Credential, RemovalResponse


class ScriptedTransport:
    """Transport answering from a script of status codes and exceptions.

    Each call consumes the next script step; once the script runs out every
    call answers with `default`. Tracks how many calls overlap.
    """

    def __init__(self, script=(), default: int = 1):
        self.script = list(script)
        self.default = default
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0
        self.on_call: Callable[[str], None] | None = None

    async def submit_removal(self, identifier: str, credential: Credential) -> RemovalResponse:
        self.calls.append(identifier)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.on_call is not None:
                self.on_call(identifier)
            await asyncio.sleep(0)
            step = self.script.pop(0) if self.script else self.default
            if isinstance(step, BaseException):
                raise step
            return RemovalResponse(identifier=identifier, status_code=step, payload={"success": step})
        finally:
            self.active -= 1


class BlockingTransport:
    """Transport that holds every request until `release` is set."""

    def __init__(self, status_code: int = 1):
        self.status_code = status_code
        self.calls: list[str] = []
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def submit_removal(self, identifier: str, credential: Credential) -> RemovalResponse:
        self.calls.append(identifier)
        self.started.set()
        await self.release.wait()
        return RemovalResponse(identifier=identifier, status_code=self.status_code)


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Records requested delays instead of waiting them out."""

    def __init__(self, clock: FakeClock | None = None):
        self.delays: list[float] = []
        self.clock = clock

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.clock is not None:
            self.clock.advance(seconds)
        await asyncio.sleep(0)
