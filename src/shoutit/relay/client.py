"""Outbound HTTPS client for the push provider.

A single aiohttp.ClientSession is created by connect() and shared by every
request the server handles. The session's connector pools connections and
the TLS context, so it must not be rebuilt per request.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import aiohttp

from shoutit.errors import UpstreamError, UpstreamTimeout

logger = logging.getLogger(__name__)


@dataclass
class ProviderClientConfig:
    """Configuration for the provider client."""

    # Timeouts (seconds)
    connect_timeout: float = 10.0
    read_timeout: float = 30.0

    # Maximum simultaneous connections held by the pool
    connection_limit: int = 100


@dataclass(frozen=True)
class ProviderResponse:
    """A fully buffered provider response."""

    status: int
    body: bytes
    content_type: str | None = None


@dataclass
class ProviderClient:
    """Shared HTTPS client used to forward notification requests.

    Example:
        >>> client = ProviderClient(ProviderClientConfig())
        >>> await client.connect()
        >>> response = await client.post(url, data=b"{}", headers={})
        >>> await client.close()
    """

    config: ProviderClientConfig
    _session: aiohttp.ClientSession | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None and not self._session.closed

    async def connect(self) -> None:
        """Create the HTTP session. Must run inside the serving event loop."""
        if self.connected:
            return
        timeout = aiohttp.ClientTimeout(
            connect=self.config.connect_timeout,
            total=self.config.read_timeout,
        )
        connector = aiohttp.TCPConnector(limit=self.config.connection_limit)
        self._session = aiohttp.ClientSession(timeout=timeout, connector=connector)
        logger.debug(
            "Provider client connected (limit=%d, connect_timeout=%.1fs, read_timeout=%.1fs)",
            self.config.connection_limit,
            self.config.connect_timeout,
            self.config.read_timeout,
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def post(self, url: str, data: bytes, headers: dict[str, str]) -> ProviderResponse:
        """Send one POST request and buffer the whole response.

        Any HTTP status is returned as-is; only transport failures raise.

        Raises:
            UpstreamTimeout: If the provider does not answer in time.
            UpstreamError: If the provider cannot be reached.
            RuntimeError: If connect() has not been called.
        """
        if self._session is None:
            raise RuntimeError("Client not connected. Call connect() first.")

        try:
            async with self._session.post(url, data=data, headers=headers) as response:
                body = await response.read()
                return ProviderResponse(
                    status=response.status,
                    body=body,
                    content_type=response.headers.get("Content-Type"),
                )
        except asyncio.TimeoutError as err:
            raise UpstreamTimeout(f"Provider request timed out: {url}") from err
        except aiohttp.ClientError as err:
            raise UpstreamError(
                f"Provider request failed: {type(err).__name__}: {err}"
            ) from err
