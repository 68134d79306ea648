"""
Abstract base class for data collectors.

Defines session management and the single request path every collector
uses. Requests never raise for network or HTTP failures: they come back as
a ``Lookup`` so the caller can degrade only the fields that source supplies.
"""

import asyncio
import logging
from abc import ABC
from typing import Any

import aiohttp

from pkgintel import __version__
from pkgintel.core.exceptions import NetworkError, RateLimitError
from pkgintel.core.models import Lookup

logger = logging.getLogger(__name__)

# Maximum response size (64 MB). Full npm packuments of long-lived packages
# run into the tens of megabytes.
MAX_RESPONSE_SIZE = 64 * 1024 * 1024


class Collector(ABC):
    """Abstract base class for data collectors.

    All collectors share common functionality like session management
    and error handling. Specific collectors implement the fetch methods
    for their respective data sources.
    """

    # Name used in log messages and rate limit errors
    SERVICE = "unknown"

    MAX_RESPONSE_SIZE = MAX_RESPONSE_SIZE

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: int = 30,
    ):
        """Initialize the collector.

        Args:
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            timeout: Request timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "Collector":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Lookup[Any]:
        """GET a JSON document.

        Args:
            url: Request URL.
            params: Optional query parameters.

        Returns:
            FOUND with the decoded body, ABSENT on 404, ERROR on any other
            failure.
        """
        try:
            async with self.session.get(
                url,
                headers=self._build_headers(),
                params=params,
            ) as resp:
                if resp.status == 404:
                    logger.debug("%s: not found: %s", self.SERVICE, url)
                    return Lookup.absent(f"{url} returned 404")
                self._raise_for_status(url, resp)
                self._check_response_size(url, resp)
                return Lookup.found(await resp.json(content_type=None))

        except NetworkError as e:
            logger.warning("%s lookup failed: %s", self.SERVICE, e)
            return Lookup.error(str(e))
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            error = NetworkError(url, details=str(e) or type(e).__name__)
            logger.warning("%s lookup failed: %s", self.SERVICE, error)
            return Lookup.error(str(error))

    def _raise_for_status(self, url: str, resp: aiohttp.ClientResponse) -> None:
        """Raise NetworkError (or RateLimitError) for non-success statuses."""
        if resp.status == 429:
            raise RateLimitError(url, self.SERVICE)
        if resp.status != 200:
            raise NetworkError(url, resp.status)

    def _build_headers(self) -> dict[str, str]:
        """Build common request headers.

        Override in subclasses to add authentication or other headers.
        """
        return {
            "User-Agent": f"pkgintel/{__version__}",
            "Accept": "application/json",
        }

    def _check_response_size(self, url: str, response: aiohttp.ClientResponse) -> None:
        """Check if response size is within acceptable limits.

        Raises:
            NetworkError: If the declared response size is too large.
        """
        content_length = response.headers.get("Content-Length")
        if content_length is None:
            return
        try:
            size = int(content_length)
        except ValueError:
            return  # Invalid Content-Length header, proceed with caution
        if size > self.MAX_RESPONSE_SIZE:
            raise NetworkError(
                url,
                details=f"Response of {size / (1024 * 1024):.1f} MB exceeds the "
                f"{self.MAX_RESPONSE_SIZE / (1024 * 1024):.0f} MB limit",
            )
