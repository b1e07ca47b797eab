"""Origin fetcher protocol.

Defines the interface for the remote service consulted on a cache miss.
"""

from typing import Protocol, runtime_checkable

from image_cache_proxy.entities import CacheKey


@runtime_checkable
class OriginFetcher(Protocol):
    """Protocol for origin image services."""

    async def fetch(self, key: CacheKey) -> bytes:
        """Fetch the image for a key from the origin.

        Args:
            key: The cache key, used to build the origin URL

        Returns:
            The response body of a 2xx response

        Raises:
            OriginUnavailableError: On network failure, timeout or non-2xx status
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
