"""Image Cache Proxy - local caching proxy for origin images.

Images are identified by a short code taken from the request path. The
first GET for a code fetches the image from the origin and stores it as
``{cache_dir}/{code}.jpg``; later requests are served from disk.

Layers:
    - protocols: Interface contracts (BlobStore, OriginFetcher)
    - repositories: Filesystem store and HTTP origin implementations
    - services: Business logic (get/put/delete, single-flight fetches)
    - handlers: HTTP request handlers
    - entities: Domain models (CacheKey)

Usage:
    ```python
    from image_cache_proxy.api import create_app
    from image_cache_proxy.config import Settings

    app = create_app(Settings(cache_dir=Path("./cache")))
    ```
"""

__version__ = "0.1.0"

from image_cache_proxy.config import Settings, get_settings  # noqa: E402
from image_cache_proxy.entities import CacheKey  # noqa: E402
from image_cache_proxy.errors import (  # noqa: E402
    CacheMissError,
    ImageCacheError,
    InvalidKeyError,
    OriginUnavailableError,
    PayloadTooLargeError,
    StoreIOError,
    UnsupportedMethodError,
)
from image_cache_proxy.handlers import ImageHandler  # noqa: E402
from image_cache_proxy.protocols import BlobStore, OriginFetcher  # noqa: E402
from image_cache_proxy.repositories import FileBlobStore, HttpOriginFetcher  # noqa: E402
from image_cache_proxy.services import ImageCacheService  # noqa: E402

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "BlobStore",
    "OriginFetcher",
    # Services (business logic)
    "ImageCacheService",
    # Handlers (HTTP)
    "ImageHandler",
    # Repositories (data access)
    "FileBlobStore",
    "HttpOriginFetcher",
    # Entities (domain models)
    "CacheKey",
    # Errors
    "ImageCacheError",
    "InvalidKeyError",
    "CacheMissError",
    "OriginUnavailableError",
    "StoreIOError",
    "PayloadTooLargeError",
    "UnsupportedMethodError",
]
