"""
Steam account licenses page scanner

Finds the free licenses that can be removed from the account. Each removable
entry on https://store.steampowered.com/account/licenses/ carries a link like

    <div class="free_license_remove_link">
        <a href="javascript:RemoveFreeLicense( 12345, 'Some Game' );">Remove</a>
    </div>

and the package id is the first run of digits in that href.

Usage:
    from license_remover.sources import LicensePageSource

    source = LicensePageSource(credential=credential)
    ids = await source.discover()

    # Or from a page saved in the browser
    ids = await LicensePageSource(html_path=Path("licenses.html")).discover()
"""

import asyncio
import re
from pathlib import Path
from typing import Any

import aiohttp
from bs4 import BeautifulSoup

from ..config.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    LICENSES_PATH,
    REMOVE_LINK_SELECTOR,
    STORE_URL,
)
from ..core.errors import DiscoveryError
from ..core.types import Credential
from ..observability.logger import get_logger
from .removal_client import RemovalClient

logger = get_logger(__name__)

_PACKAGE_ID = re.compile(r"\d+")


def parse_license_ids(html: str) -> list[str]:
    """Extract removable package ids from licenses page HTML.

    Duplicates are dropped; page order is kept.
    """
    soup = BeautifulSoup(html, "html.parser")
    ids: list[str] = []
    seen: set[str] = set()

    for link in soup.select(REMOVE_LINK_SELECTOR):
        href = link.get("href") or ""
        match = _PACKAGE_ID.search(str(href))
        if not match:
            logger.debug("Skipping remove link without package id", extra={"href": href})
            continue

        package_id = match.group()
        if package_id not in seen:
            seen.add(package_id)
            ids.append(package_id)

    return ids


class LicensePageSource:
    """Discovery source backed by the account licenses page."""

    DEFAULT_HEADERS = {
        "User-Agent": RemovalClient.DEFAULT_HEADERS["User-Agent"],
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }

    def __init__(
        self,
        credential: Credential | None = None,
        *,
        html_path: Path | None = None,
        store_url: str = STORE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Initialize the licenses page source.

        Args:
            credential: Logged-in session (required unless html_path is given)
            html_path: Saved copy of the licenses page to parse instead
            store_url: Store base URL
            timeout: Request timeout in seconds
        """
        self.credential = credential
        self.html_path = html_path
        self.store_url = store_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        return "licenses-file" if self.html_path else "licenses-page"

    @property
    def licenses_url(self) -> str:
        return f"{self.store_url}{LICENSES_PATH}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            cookies = RemovalClient.session_cookies(self.credential) if self.credential else None
            self._session = aiohttp.ClientSession(
                headers=self.DEFAULT_HEADERS,
                cookies=cookies,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "LicensePageSource":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def discover(self) -> list[str]:
        """Return removable package ids in page order."""
        if self.html_path is not None:
            html = self._read_saved_page(self.html_path)
        else:
            html = await self._fetch_page()
        ids = parse_license_ids(html)
        logger.info(f"Found {len(ids)} removable licenses", extra={"source": self.name})
        return ids

    def _read_saved_page(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise DiscoveryError(
                f"Cannot read saved licenses page {path}: {e}",
                source=self.name,
            ) from e

    async def _fetch_page(self) -> str:
        if self.credential is None:
            raise DiscoveryError(
                "A Steam session is required to fetch the licenses page",
                source=self.name,
            )

        session = await self._get_session()
        try:
            async with session.get(self.licenses_url) as resp:
                if resp.status != 200:
                    raise DiscoveryError(
                        f"Licenses page returned HTTP {resp.status}",
                        source=self.name,
                    )
                # Logged-out sessions are redirected to the login form
                if "/login" in str(resp.url):
                    raise DiscoveryError(
                        "Redirected to login - the Steam session has expired",
                        source=self.name,
                    )
                return await resp.text()

        except aiohttp.ClientError as e:
            raise DiscoveryError(
                f"Failed to fetch licenses page: {e}",
                source=self.name,
            ) from e
        except asyncio.TimeoutError as e:
            raise DiscoveryError(
                f"Licenses page timed out after {self.timeout}s",
                source=self.name,
            ) from e
