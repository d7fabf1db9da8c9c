"""Configuration module for license removal."""

from .constants import (
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_COOLDOWN_TICK,
    DEFAULT_REQUEST_DELAY,
    DEFAULT_REQUEST_TIMEOUT,
    STORE_URL,
    SUCCESS_CODES,
    THROTTLE_CODE,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "STORE_URL",
    "THROTTLE_CODE",
    "SUCCESS_CODES",
    "DEFAULT_REQUEST_DELAY",
    "DEFAULT_COOLDOWN_SECONDS",
    "DEFAULT_COOLDOWN_TICK",
    "DEFAULT_REQUEST_TIMEOUT",
]
