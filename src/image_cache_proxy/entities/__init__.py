"""Domain entities for internal representation.

Pure frozen dataclasses with no HTTP or filesystem dependencies.
"""

from .cache_key import FILE_SUFFIX, KEY_PATTERN, CacheKey

__all__ = ["CacheKey", "FILE_SUFFIX", "KEY_PATTERN"]
