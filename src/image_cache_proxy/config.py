import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def env_str(name: str, default: str):
    return field(default_factory=lambda: os.getenv(name, default))


def env_number(name: str, default: str, kind: type):
    """Field whose default is parsed from the environment when Settings is built."""

    def factory():
        raw = os.getenv(name, default)
        try:
            return kind(raw)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {raw!r}") from None

    return field(default_factory=factory)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    The CLI overrides host, port and cache directory with its required
    options, so the environment only supplies defaults. Variables are read
    when an instance is built, so a malformed value fails in ``Settings()``
    rather than at import.
    """

    # API
    host: str = env_str("API_HOST", "127.0.0.1")
    port: int = env_number("API_PORT", "8000", int)

    # Cache
    cache_dir: Path = field(default_factory=lambda: Path(os.getenv("CACHE_DIR", "./cache")))
    max_body_bytes: int = env_number("MAX_BODY_BYTES", str(10 * 1024 * 1024), int)  # 10 MiB

    # Origin
    origin_base_url: str = env_str("ORIGIN_BASE_URL", "https://http.cat")
    origin_timeout: float = env_number("ORIGIN_TIMEOUT", "10.0", float)

    # Logging
    log_level: str = env_str("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 < self.port <= 65535:
            raise ValueError(f"API_PORT must be between 1 and 65535, got {self.port}")

        if self.origin_timeout <= 0:
            raise ValueError("ORIGIN_TIMEOUT must be greater than 0")

        if self.max_body_bytes <= 0:
            raise ValueError("MAX_BODY_BYTES must be greater than 0")

        if not self.origin_base_url.startswith(("http://", "https://")):
            raise ValueError(f"ORIGIN_BASE_URL must be an http(s) URL, got {self.origin_base_url!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
