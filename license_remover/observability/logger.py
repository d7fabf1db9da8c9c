"""Structured logger for license removal.

Context set with `log_context` is attached to every record as attributes,
so it reaches the rich console, the JSON stream and any test capture alike.

Usage:
    from license_remover.observability import get_logger, log_context

    logger = get_logger(__name__)

    with log_context(run_id="a1b2", phase="remove"):
        logger.info("Removing license", extra={"status_code": 1})
        # JSON: {"timestamp": "...", "message": "...", "run_id": "a1b2", "phase": "remove", "status_code": 1}
"""

from __future__ import annotations

import contextvars
import json
import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "license_remover"

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
        "markup",
        "highlighter",
    }
)


@dataclass(frozen=True)
class LogContext:
    """Fields stamped onto every record logged inside `log_context`."""

    run_id: str | None = None
    phase: str | None = None
    identifier: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


_current: contextvars.ContextVar[LogContext] = contextvars.ContextVar(
    "license_remover_log_context",
    default=LogContext(),
)


def current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**fields: Any) -> Generator[LogContext, None, None]:
    """Layer context fields over the enclosing context.

    Example:
        with log_context(phase="discover"):
            logger.info("Scanning licenses page")
    """
    context = replace(_current.get(), **fields)
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


class ContextFilter(logging.Filter):
    """Copies the active LogContext onto records.

    Values passed explicitly through `extra` win over context values.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_context().to_dict().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Fields a record carries beyond the standard LogRecord attributes."""
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(extra_fields(record))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


# Track if logging has been set up
_logging_configured = False


def setup_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    quiet: bool = False,
    console: Console | None = None,
    force: bool = False,
) -> None:
    """Configure the `license_remover` logger tree.

    Args:
        level: Logging level (default: INFO)
        json_format: JSON lines on stderr instead of the rich console
        quiet: Only errors reach the handler
        console: Rich console to log through (stderr console if None)
        force: Reconfigure even if logging was already set up
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    root.propagate = False
    root.handlers.clear()

    handler: logging.Handler
    if json_format:
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=level <= logging.DEBUG,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(ContextFilter())
    handler.setLevel(logging.ERROR if quiet else level)
    root.addHandler(handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the `license_remover` namespace."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
