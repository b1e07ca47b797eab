"""HTTP origin fetcher.

Fetches images from a remote service templated by key, e.g.
``https://http.cat/200``. Runs inside the request path, so every fetch is
bounded by a deadline.
"""

import asyncio
import logging

import httpx

from image_cache_proxy.config import Settings
from image_cache_proxy.entities import CacheKey
from image_cache_proxy.errors import OriginUnavailableError

logger = logging.getLogger(__name__)


class HttpOriginFetcher:
    """httpx-based implementation of the OriginFetcher protocol.

    Example:
        ```python
        fetcher = HttpOriginFetcher.create(settings)
        data = await fetcher.fetch(CacheKey("200"))
        await fetcher.aclose()
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the origin fetcher.

        Args:
            base_url: Origin URL prefix; the key is appended as the last path segment.
            timeout: Deadline in seconds for a whole fetch, body included.
            client: Optional pre-built client. An injected client is not closed by ``aclose``.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def create(cls, settings: Settings) -> "HttpOriginFetcher":
        """Factory method to create a fetcher from settings."""
        return cls(base_url=settings.origin_base_url, timeout=settings.origin_timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    def url_for(self, key: CacheKey) -> str:
        return f"{self._base_url}/{key}"

    async def fetch(self, key: CacheKey) -> bytes:
        url = self.url_for(key)

        try:
            response = await asyncio.wait_for(self.client.get(url), timeout=self._timeout)
            response.raise_for_status()
        except asyncio.TimeoutError as e:
            raise OriginUnavailableError(str(key), f"timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise OriginUnavailableError(str(key), f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise OriginUnavailableError(str(key), f"{type(e).__name__}: {e}") from e

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    async def aclose(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
