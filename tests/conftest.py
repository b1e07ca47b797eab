"""Shared fixtures for image cache proxy tests."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from image_cache_proxy.api import create_app
from image_cache_proxy.config import Settings

from .fakes import JPEG_5000, FakeOrigin


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Cache directory that does not exist yet."""
    return tmp_path / "cache"


@pytest.fixture
def settings(cache_dir: Path) -> Settings:
    """Settings pointing at the temporary cache directory."""
    return Settings(
        host="127.0.0.1",
        port=8080,
        cache_dir=cache_dir,
        origin_base_url="https://origin.test",
        origin_timeout=1.0,
        max_body_bytes=64 * 1024,
    )


@pytest.fixture
def origin() -> FakeOrigin:
    """Origin that knows code 200 and nothing else."""
    return FakeOrigin({"200": JPEG_5000})


@pytest.fixture
def client(settings: Settings, origin: FakeOrigin):
    """Create a test client with lifespan started."""
    app = create_app(settings, origin=origin)
    with TestClient(app) as test_client:
        yield test_client
