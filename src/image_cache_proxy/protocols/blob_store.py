"""Blob storage protocol.

Defines the interface for the persistence layer that maps a validated
cache key to a binary payload on durable storage.

Implementations can include:
- A directory of files (default)
- An in-memory dict (tests)
- An object store bucket
"""

from typing import Protocol, runtime_checkable

from image_cache_proxy.entities import CacheKey


@runtime_checkable
class BlobStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these coroutines satisfies the protocol,
    no explicit inheritance needed.
    """

    async def exists(self, key: CacheKey) -> bool:
        """Check whether an entry is stored under the key.

        Never raises; storage errors are reported as False.
        """
        ...

    async def read(self, key: CacheKey) -> bytes:
        """Read the full payload stored under the key.

        Raises:
            CacheMissError: If the entry is absent or unreadable
        """
        ...

    async def write(self, key: CacheKey, data: bytes) -> None:
        """Create or overwrite the entry.

        Readers must never observe a partially written payload.

        Raises:
            StoreIOError: If the payload could not be persisted
        """
        ...

    async def delete(self, key: CacheKey) -> None:
        """Remove the entry.

        Raises:
            CacheMissError: If no entry is stored under the key
            StoreIOError: If the entry could not be removed
        """
        ...

    async def count(self) -> int:
        """Count stored entries."""
        ...
