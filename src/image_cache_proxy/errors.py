"""Domain errors raised by the store, the origin fetcher and the service layer.

Handlers translate these into plain-text HTTP responses; nothing in this
module knows about HTTP.
"""


class ImageCacheError(Exception):
    """Base class for all image cache errors."""


class InvalidKeyError(ImageCacheError):
    """The requested key is empty or not a safe file name."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Invalid cache key: {key!r}")
        self.key = key


class CacheMissError(ImageCacheError):
    """No entry is stored under the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No cached entry for key: {key}")
        self.key = key


class OriginUnavailableError(ImageCacheError):
    """The origin could not produce the image (network, timeout or non-2xx)."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Origin fetch failed for {key}: {reason}")
        self.key = key
        self.reason = reason


class StoreIOError(ImageCacheError):
    """The cache directory could not be read from or written to."""


class PayloadTooLargeError(ImageCacheError):
    """A request body exceeded the configured limit."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Request body exceeds {limit} bytes")
        self.limit = limit


class UnsupportedMethodError(ImageCacheError):
    """The HTTP method has no operation attached to it."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported method: {method}")
        self.method = method
