"""Collaborators of the processing loop: discovery and transport."""

from .base import DiscoverySource, RemovalTransport
from .licenses_page import LicensePageSource, parse_license_ids
from .removal_client import RemovalClient
from .static import IdentifierFileSource, StaticSource

__all__ = [
    # Protocols
    "DiscoverySource",
    "RemovalTransport",
    # Discovery
    "LicensePageSource",
    "IdentifierFileSource",
    "StaticSource",
    "parse_license_ids",
    # Transport
    "RemovalClient",
]
