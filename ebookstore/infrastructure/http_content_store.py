"""HTTP implementation of ContentStore."""

from typing import Optional

import httpx

from ..domain.exceptions import ContentUnavailable
from ..domain.interfaces.content_store import ContentStore


class HttpContentStore(ContentStore):
    """Downloads book files from absolute http(s) URLs."""

    name = "http"

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, reference: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(reference)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise ContentUnavailable(f"HTTP error for {reference}: {e}")
