"""Cache key domain entity."""

import re
from dataclasses import dataclass

from image_cache_proxy.errors import InvalidKeyError

# Alphanumeric first character, then letters, digits, "_" or "-".
# No dots or separators, so a key can never escape the cache directory.
KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")

FILE_SUFFIX = ".jpg"


@dataclass(frozen=True)
class CacheKey:
    """Validated identifier of a cached image.

    Attributes:
        value: The key text, e.g. "200"
    """

    value: str

    def __post_init__(self) -> None:
        if not KEY_PATTERN.fullmatch(self.value):
            raise InvalidKeyError(self.value)

    @classmethod
    def from_path(cls, path: str) -> "CacheKey":
        """Derive a key from a request path by stripping the leading "/".

        Args:
            path: Request path such as "/200"

        Returns:
            The validated CacheKey

        Raises:
            InvalidKeyError: If the remaining text is empty or unsafe
        """
        return cls(path[1:] if path.startswith("/") else path)

    @property
    def filename(self) -> str:
        """File name of the entry inside the cache directory."""
        return f"{self.value}{FILE_SUFFIX}"

    def __str__(self) -> str:
        return self.value
