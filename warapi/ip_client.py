"""HTTP client for looking up this server's outbound IP address.

Clash of Clans API tokens are bound to the caller's public IP, so the
``/api/myip`` endpoint reports what the outside world sees. The lookup
is delegated to ipify.
"""

import logging
from typing import Optional

import httpx

from warcore.config import IP_LOOKUP_TIMEOUT, IP_LOOKUP_URL
from warcore.exceptions import UpstreamError

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse IP data"


class OutboundIPClient:
    """Async client for the outbound IP lookup service.

    Failures are not retried; they surface as :class:`UpstreamError`
    carrying a message suitable for the API response.
    """

    def __init__(
        self,
        url: str = IP_LOOKUP_URL,
        timeout: float = IP_LOOKUP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self) -> None:
        """Initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                transport=self._transport,
            )
            logger.debug("OutboundIPClient HTTP client started")

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("OutboundIPClient HTTP client closed")

    async def get_outbound_ip(self) -> str:
        """Fetch the public IP address this server's requests originate from.

        Raises:
            UpstreamError: The request failed or the body was not the
                expected ``{"ip": ...}`` JSON object
        """
        if self._client is None:
            await self.start()

        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("IP lookup request to %s failed: %s", self._url, e)
            raise UpstreamError(str(e) or type(e).__name__) from e

        try:
            return response.json()["ip"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Unexpected IP lookup response: %r", response.text[:200])
            raise UpstreamError(PARSE_FAILURE_MESSAGE) from e
