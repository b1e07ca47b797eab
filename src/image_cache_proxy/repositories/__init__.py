"""Repository layer for data access.

Concrete implementations of the store and origin protocols: a directory of
files for cached images and an httpx client for the remote origin.
"""

from image_cache_proxy.protocols import BlobStore, OriginFetcher

from .file_repository import FileBlobStore
from .http_origin_fetcher import HttpOriginFetcher

__all__ = [
    "BlobStore",
    "OriginFetcher",
    "FileBlobStore",
    "HttpOriginFetcher",
]
