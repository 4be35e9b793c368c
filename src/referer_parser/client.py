"""
HTTP client for fetching the internal-host allow-list.

The fetch happens once, outside classification. A failed fetch yields
None ("no allow-list available"), which the parser treats as "only an
exact page-host match is internal".
"""
import logging

import httpx

from .config import DEFAULT_FETCH_TIMEOUT, validate_allow_list_url
from .internal import parse_allow_list

logger = logging.getLogger(__name__)


class AllowListClient:
    """Client for downloading an allow-list text file."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        validate_allow_list_url(url)
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def _get(self) -> str:
        """Download the raw allow-list body."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(self.url, headers={"Accept": "text/plain"})
            response.raise_for_status()
            return response.text

    async def fetch(self) -> tuple[str, ...] | None:
        """Fetch and parse the allow-list.

        Returns:
            Parsed entries, or None if the list could not be fetched
        """
        logger.info(f"Fetching allow-list from {self.url}")
        try:
            body = await self._get()
        except httpx.HTTPError as e:
            logger.warning(f"Allow-list fetch from {self.url} failed: {e}")
            return None

        entries = parse_allow_list(body.splitlines())
        logger.info(f"Loaded {len(entries)} allow-list entries from {self.url}")
        return entries


async def fetch_allow_list(
    url: str,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[str, ...] | None:
    """Fetch an allow-list once; see AllowListClient.fetch()."""
    return await AllowListClient(url, timeout=timeout, transport=transport).fetch()
