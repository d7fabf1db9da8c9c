"""Pytest configuration and shared fixtures."""

import logging

import pytest

from license_remover.core.types import Credential, ProgressEvent
from license_remover.observability import logger as logger_module
from license_remover.pipeline import ProgressReporter

from .fakes import FakeClock, RecordingSleep


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any setup_logging() a test performed."""
    yield
    root = logging.getLogger(logger_module.ROOT_LOGGER)
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)
    logger_module._logging_configured = False


@pytest.fixture
def credential() -> Credential:
    return Credential(session_id="abc123session", login_cookie="76561198000000000%7C%7Ctoken")


@pytest.fixture
def events() -> list[ProgressEvent]:
    return []


@pytest.fixture
def reporter(events) -> ProgressReporter:
    """Reporter that records every event into `events`."""
    return ProgressReporter(sinks=[events.append])


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
