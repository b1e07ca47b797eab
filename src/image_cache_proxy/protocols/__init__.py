"""Protocol interfaces for swappable implementations.

Protocols use structural typing, so the service layer can be tested with
in-memory stores and fake origins.
"""

from .blob_store import BlobStore
from .origin_fetcher import OriginFetcher

__all__ = [
    "BlobStore",
    "OriginFetcher",
]
