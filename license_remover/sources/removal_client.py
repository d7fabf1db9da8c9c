"""
Steam Store license removal client

Issues the same request the store's "Remove" link does on the account
licenses page: a form POST of the session id and the package id.

Usage:
    from license_remover.sources import RemovalClient

    async with RemovalClient() as client:
        response = await client.submit_removal("12345", credential)
        response.status_code  # 1 or 8 = removed, 84 = throttled

Response codes:
    - {"success": 1} / {"success": 8}: license removed
    - {"success": 84}: too many removals, account locked for a while
"""

import asyncio
import json
from typing import Any

import aiohttp

from ..config.constants import DEFAULT_REQUEST_TIMEOUT, REMOVE_LICENSE_PATH, STORE_URL
from ..core.errors import HTTPStatusError, NetworkError, PayloadError
from ..core.types import Credential, RemovalResponse
from ..observability.logger import get_logger

logger = get_logger(__name__)


class RemovalClient:
    """aiohttp transport for the removelicense endpoint."""

    DEFAULT_HEADERS = {
        "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Accept": "application/json, text/javascript, */*; q=0.01",
        "X-Requested-With": "XMLHttpRequest",
    }

    def __init__(
        self,
        store_url: str = STORE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Initialize the removal client.

        Args:
            store_url: Store base URL (no trailing slash)
            timeout: Request timeout in seconds
        """
        self.store_url = store_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def remove_url(self) -> str:
        return f"{self.store_url}{REMOVE_LICENSE_PATH}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                headers=self.DEFAULT_HEADERS,
                timeout=timeout,
            )
        return self._session

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "RemovalClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @staticmethod
    def session_cookies(credential: Credential) -> dict[str, str]:
        """Cookies the store expects alongside the form's session id."""
        cookies = {"sessionid": credential.session_id}
        if credential.login_cookie:
            cookies["steamLoginSecure"] = credential.login_cookie
        return cookies

    async def submit_removal(
        self,
        identifier: str,
        credential: Credential,
    ) -> RemovalResponse:
        """
        Remove one license from the account.

        Args:
            identifier: Steam package id
            credential: Logged-in session

        Returns:
            RemovalResponse with the payload's `success` code

        Raises:
            HTTPStatusError: Non-2xx HTTP status
            NetworkError: Connection failure or timeout
            PayloadError: Body is not JSON or has no integer `success`
        """
        session = await self._get_session()
        form = {"sessionid": credential.session_id, "packageid": identifier}

        try:
            async with session.post(
                self.remove_url,
                data=form,
                cookies=self.session_cookies(credential),
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise HTTPStatusError(
                        f"Failed to remove license {identifier}: HTTP {resp.status}",
                        status=resp.status,
                        identifier=identifier,
                    )
                body = await resp.text()

        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Request for license {identifier} failed: {str(e) or type(e).__name__}",
                identifier=identifier,
            ) from e
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Request for license {identifier} timed out after {self.timeout}s",
                identifier=identifier,
            ) from e

        response = self._parse_response(identifier, body)
        logger.debug(
            f"License {identifier} removal response: {response.payload}",
            extra={"status_code": response.status_code},
        )
        return response

    @staticmethod
    def _parse_response(identifier: str, body: str) -> RemovalResponse:
        """Extract the integer `success` field from a JSON body."""
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise PayloadError(
                f"Response for license {identifier} is not JSON: {e}",
                body=body,
                identifier=identifier,
            ) from e

        if not isinstance(payload, dict):
            raise PayloadError(
                f"Response for license {identifier} is not a JSON object",
                body=body,
                identifier=identifier,
            )

        code = payload.get("success")
        # bool is an int subclass; true/false is not a status code
        if isinstance(code, bool) or not isinstance(code, int):
            raise PayloadError(
                f"Response for license {identifier} has no integer 'success' field",
                body=body,
                identifier=identifier,
            )

        return RemovalResponse(identifier=identifier, status_code=code, payload=payload)
