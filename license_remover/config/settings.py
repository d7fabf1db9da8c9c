"""Application settings using Pydantic. No side effects at import time."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigurationError
from ..core.types import Credential
from .constants import (
    DEFAULT_COOLDOWN_SECONDS,
    DEFAULT_COOLDOWN_TICK,
    DEFAULT_MAX_RETRY_DELAY,
    DEFAULT_REQUEST_DELAY,
    DEFAULT_REQUEST_TIMEOUT,
    STORE_URL,
    SUCCESS_CODES,
    THROTTLE_CODE,
)


class Settings(BaseSettings):
    """Application settings with validation.

    Settings are loaded from environment variables and .env file.
    No side effects at class definition time - .env is loaded only when
    Settings() is instantiated.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # === Steam session (supplied from a logged-in browser) ===
    steam_session_id: str | None = None
    steam_login_secure: str | None = None

    # === Endpoint ===
    store_url: str = STORE_URL
    request_timeout: Annotated[float, Field(gt=0)] = DEFAULT_REQUEST_TIMEOUT

    # === Pacing ===
    request_delay: Annotated[float, Field(ge=0)] = DEFAULT_REQUEST_DELAY
    cooldown_seconds: Annotated[float, Field(ge=0)] = DEFAULT_COOLDOWN_SECONDS
    cooldown_tick_interval: Annotated[float, Field(ge=0)] = DEFAULT_COOLDOWN_TICK
    retry_backoff: Literal["fixed", "exponential"] = "fixed"
    max_retry_delay: Annotated[float, Field(gt=0)] = DEFAULT_MAX_RETRY_DELAY

    # === Response codes ===
    throttle_code: int = THROTTLE_CODE
    success_codes: list[int] = Field(default_factory=lambda: list(SUCCESS_CODES))

    @property
    def has_credentials(self) -> bool:
        """Check if a Steam session id is configured."""
        return bool(self.steam_session_id)

    def credential(self) -> Credential:
        """Build the removal credential.

        Raises:
            ConfigurationError: If no session id is configured
        """
        if not self.steam_session_id:
            raise ConfigurationError(
                "Steam session not configured. Set STEAM_SESSION_ID "
                "(and STEAM_LOGIN_SECURE) or pass --session-id."
            )
        return Credential(
            session_id=self.steam_session_id,
            login_cookie=self.steam_login_secure,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This is the recommended way to access settings to avoid
    repeated .env file parsing.
    """
    return Settings()
