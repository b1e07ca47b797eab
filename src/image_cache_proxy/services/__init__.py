"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_service import ImageCacheService
from .single_flight import SingleFlight

__all__ = [
    "ImageCacheService",
    "SingleFlight",
]
