"""Error hierarchy for license removal.

All errors inherit from RemoverError.
Use `is_retryable` property to determine if an error can be retried.
Transport errors are always retryable: the processing loop requeues the
affected identifier instead of dropping it.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any


class RemoverError(Exception):
    """Base error for all license removal errors.

    Attributes:
        message: Error description
        identifier: Related package id (if applicable)
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: str | None = None,
    ) -> None:
        self.identifier = identifier
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether this error can be retried."""
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "identifier": self.identifier,
            "is_retryable": self.is_retryable,
        }


class TransportError(RemoverError):
    """A removal request did not produce a usable response.

    This is retryable - the identifier goes back on the queue.
    """

    def __init__(
        self,
        message: str = "Removal request failed",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

    @property
    def is_retryable(self) -> bool:
        return True


class HTTPStatusError(TransportError):
    """Endpoint answered with a non-2xx HTTP status."""

    def __init__(
        self,
        message: str = "Unexpected HTTP status",
        *,
        status: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["status"] = self.status
        return d


class NetworkError(TransportError):
    """Connection failure or timeout before a response arrived."""

    def __init__(
        self,
        message: str = "Network error",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)


class PayloadError(TransportError):
    """Response body is not JSON or lacks an integer status field."""

    def __init__(
        self,
        message: str = "Malformed response payload",
        *,
        body: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        # Truncate long bodies
        d["body"] = self.body[:200] if self.body else None
        return d


class DiscoveryError(RemoverError):
    """Could not build the initial identifier list.

    This is NOT retryable - discovery runs once before the loop starts.
    """

    def __init__(
        self,
        message: str = "Discovery failed",
        *,
        source: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.source = source

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["source"] = self.source
        return d


class ConfigurationError(RemoverError):
    """Settings are missing or invalid.

    This is NOT retryable - fix the environment and start again.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)


def classify_exception(error: Exception, identifier: str | None = None) -> RemoverError:
    """Classify a generic exception into a RemoverError.

    Anything a transport raises outside the hierarchy still ends up as a
    retryable TransportError so the identifier is requeued.

    Args:
        error: The exception to classify
        identifier: Package id for context

    Returns:
        Appropriate RemoverError subclass
    """
    if isinstance(error, RemoverError):
        if identifier and error.identifier is None:
            error.identifier = identifier
        return error

    if isinstance(error, (json.JSONDecodeError, ValueError, KeyError)):
        return PayloadError(str(error), identifier=identifier)

    if isinstance(error, (asyncio.TimeoutError, ConnectionError, OSError)):
        return NetworkError(str(error) or type(error).__name__, identifier=identifier)

    error_str = str(error).lower()

    # Network indicators
    network_indicators = [
        "connection",
        "network",
        "timeout",
        "timed out",
        "unreachable",
        "refused",
        "reset",
    ]
    if any(indicator in error_str for indicator in network_indicators):
        return NetworkError(str(error), identifier=identifier)

    # Default to a generic transport failure
    return TransportError(str(error) or type(error).__name__, identifier=identifier)
