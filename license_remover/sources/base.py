"""Protocols for the collaborators around the processing loop."""

from typing import Protocol, runtime_checkable

from ..core.types import Credential, RemovalResponse


@runtime_checkable
class DiscoverySource(Protocol):
    """Protocol for identifier producers (licenses page, file, list).

    Discovery runs once before the loop starts. The protocol is runtime
    checkable, so you can use isinstance() to verify.
    """

    @property
    def name(self) -> str:
        """Source identifier (e.g., 'licenses-page', 'file')."""
        ...

    async def discover(self) -> list[str]:
        """Return identifiers to remove, in page order.

        Raises:
            DiscoveryError: If the source cannot be read
        """
        ...


@runtime_checkable
class RemovalTransport(Protocol):
    """Protocol for issuing a single removal request.

    Implementations raise TransportError subclasses so the three failure
    cases stay distinguishable:
        HTTPStatusError: endpoint answered with a non-2xx status
        NetworkError: no response (connection failure, timeout)
        PayloadError: response body lacks an integer status
    """

    async def submit_removal(
        self,
        identifier: str,
        credential: Credential,
    ) -> RemovalResponse:
        """Ask the endpoint to remove one license."""
        ...
