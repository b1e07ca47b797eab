"""Cache service for core business logic.

This service resolves get/put/delete against the store and falls back to
the origin on a miss.

Consistency model: concurrent misses for one key share a single origin
fetch and a single store write. Otherwise operations on the same key are
not locked against each other. A PUT followed by a DELETE in another task
may interleave with a GET in any order; the store's atomic replace only
guarantees that a reader never sees a partially written file. The model
is eventual, not linearizable.
"""

import logging

from image_cache_proxy.entities import CacheKey
from image_cache_proxy.errors import CacheMissError, StoreIOError
from image_cache_proxy.protocols import BlobStore, OriginFetcher

from .single_flight import SingleFlight

logger = logging.getLogger(__name__)


class ImageCacheService:
    """Core cache orchestration service.

    Depends on protocols, not concrete implementations:
    - BlobStore: a directory of files, or an in-memory fake in tests
    - OriginFetcher: the remote image service

    Example:
        ```python
        from image_cache_proxy.repositories import FileBlobStore, HttpOriginFetcher
        from image_cache_proxy.services import ImageCacheService

        service = ImageCacheService.create(
            store=FileBlobStore.create(settings.cache_dir),
            origin=HttpOriginFetcher.create(settings),
        )
        data = await service.get(CacheKey("200"))
        ```
    """

    def __init__(self, store: BlobStore, origin: OriginFetcher) -> None:
        """Initialize the cache service.

        Args:
            store: Cache storage backend (required).
            origin: Origin fetcher consulted on a miss (required).
        """
        self._store = store
        self._origin = origin
        self._flights: SingleFlight[bytes] = SingleFlight()

    @classmethod
    def create(cls, store: BlobStore, origin: OriginFetcher) -> "ImageCacheService":
        """Factory method mirroring the repositories' ``create``."""
        return cls(store=store, origin=origin)

    async def get(self, key: CacheKey) -> bytes:
        """Return the image for a key, fetching and caching it on a miss.

        Business logic:
        1. Read the entry from the store
        2. On a miss, fetch from the origin (coalesced per key)
        3. Write the fetched bytes to the store; a failed write is logged only

        Args:
            key: The cache key

        Returns:
            Cached or freshly fetched bytes

        Raises:
            OriginUnavailableError: If the entry is not cached and the origin fails
        """
        try:
            data = await self._store.read(key)
        except CacheMissError:
            logger.info(f"Cache miss for {key}, fetching from origin")
            return await self._flights.do(str(key), lambda: self._fetch_and_store(key))

        logger.debug(f"Served from cache: {key}")
        return data

    async def put(self, key: CacheKey, data: bytes) -> None:
        """Create or replace an entry.

        Raises:
            StoreIOError: If the entry could not be written
        """
        await self._store.write(key, data)
        logger.info(f"Image saved to cache: {key} ({len(data)} bytes)")

    async def delete(self, key: CacheKey) -> None:
        """Remove an entry.

        Raises:
            CacheMissError: If nothing is cached under the key
            StoreIOError: If the entry could not be removed
        """
        await self._store.delete(key)
        logger.info(f"Deleted from cache: {key}")

    async def count(self) -> int:
        """Number of cached entries."""
        return await self._store.count()

    async def drain(self) -> None:
        """Wait for in-flight origin fetches and their cache writes to finish.

        Called at shutdown, before the origin client is closed.
        """
        if self.in_flight:
            logger.info(f"Waiting for {self.in_flight} in-flight fetches")
        await self._flights.wait()

    async def _fetch_and_store(self, key: CacheKey) -> bytes:
        data = await self._origin.fetch(key)

        try:
            await self._store.write(key, data)
        except StoreIOError:
            # Serving takes priority over caching durability
            logger.exception(f"Failed to cache fetched image for {key}")
        else:
            logger.info(f"Cached new image for {key} ({len(data)} bytes)")

        return data

    @property
    def store(self) -> BlobStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def origin(self) -> OriginFetcher:
        """Get the underlying origin fetcher (for testing)."""
        return self._origin

    @property
    def in_flight(self) -> int:
        """Number of origin fetches currently running."""
        return len(self._flights)
